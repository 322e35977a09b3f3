"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from shelf.app import PackageService
from shelf.app.adapters import (
    FileOutputSink,
    FileSystemStorageAdapter,
    StdoutOutputSink,
    TarArchiveEncoder,
    ZipArchiveEncoder,
)
from shelf.app.ports import ArchiveEncoderPort, OutputSinkPort, StoragePort
from shelf.config import Settings, get_settings
from shelf.errors import ConfigurationError


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    storage_port: StoragePort
    package_service: PackageService


def _sink_factory(settings: Settings):
    def create(destination: Path | None) -> OutputSinkPort:
        if destination is None:
            return StdoutOutputSink(spool_bytes=settings.stdout_spool_bytes)
        return FileOutputSink(destination)

    return create


def _settings_problems(error: ValidationError) -> list[str]:
    problems = []
    for detail in error.errors():
        name = "_".join(str(part) for part in detail["loc"]).upper()
        problems.append(f"Invalid setting SHELF_{name}: {detail['msg']}")
    return problems


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Wire adapters into services using ``settings`` (or the global settings).

    Raises:
        ConfigurationError: If the environment or ``.env`` holds invalid settings
    """
    if settings is None:
        try:
            settings = get_settings()
        except ValidationError as exc:
            raise ConfigurationError(_settings_problems(exc)) from exc

    encoders: dict[str, ArchiveEncoderPort] = {
        TarArchiveEncoder.archive_format: TarArchiveEncoder(),
        ZipArchiveEncoder.archive_format: ZipArchiveEncoder(),
    }

    return ApplicationContainer(
        settings=settings,
        storage_port=FileSystemStorageAdapter(),
        package_service=PackageService(encoders, _sink_factory(settings)),
    )
