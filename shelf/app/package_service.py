"""Package service for self-extracting script creation.

Takes a validated ``PackagingRequest``, picks the archive encoder and writes
the assembled script to an output sink.
"""

from __future__ import annotations

import logging
import tarfile
import zipfile
from collections.abc import Callable, Mapping
from pathlib import Path

from pydantic import BaseModel

from shelf.app.ports import ArchiveEncoderPort, OutputSinkPort
from shelf.app.request_builder import PackagingRequest
from shelf.app.script_assembler import write_script
from shelf.errors import EncodingError

logger = logging.getLogger(__name__)


class PackageResult(BaseModel):
    """Summary of a completed build."""

    destination: str
    archive_format: str
    compression_level: int | None
    entry_count: int
    archive_offset: int
    archive_size: int
    archive_sha256: str
    total_size: int


class PackageService:
    """Orchestrates self-extracting script creation.

    Archive encoding and output are delegated to ports.
    """

    def __init__(
        self,
        encoders: Mapping[str, ArchiveEncoderPort],
        sink_factory: Callable[[Path | None], OutputSinkPort],
    ):
        """Initialize package service.

        Args:
            encoders: Archive encoders keyed by archive format
            sink_factory: Builds the output sink for a destination (None is stdout)
        """
        self.encoders = dict(encoders)
        self.sink_factory = sink_factory

    def build(self, request: PackagingRequest) -> PackageResult:
        """Encode ``request`` and write the self-extracting script.

        Returns:
            PackageResult describing the written script

        Raises:
            EncodingError: If any entry cannot be read or the output cannot be written
        """
        encoder = self.encoders.get(request.archive_format)
        if encoder is None:
            raise EncodingError(f"No encoder registered for archive type '{request.archive_format}'")

        sink = self.sink_factory(request.output_path)
        logger.info(
            "Packaging %d file(s) as %s into %s",
            len(request.entries),
            request.archive_format,
            sink.describe(),
        )

        try:
            assembled = write_script(request, encoder, sink)
        except EncodingError:
            raise
        except (OSError, tarfile.TarError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            logger.debug("Encoding failed", exc_info=True)
            raise EncodingError(_describe_failure(exc)) from exc

        result = PackageResult(
            destination=sink.describe(),
            archive_format=request.archive_format,
            compression_level=request.compression_level,
            entry_count=len(request.entries),
            archive_offset=assembled.archive_offset,
            archive_size=assembled.archive_size,
            archive_sha256=assembled.archive_sha256,
            total_size=assembled.total_size,
        )
        logger.debug("Archive sha256 %s (%d bytes)", result.archive_sha256, result.archive_size)
        return result


def _describe_failure(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.filename is not None:
        reason = exc.strerror or str(exc)
        return f"Failed to package '{exc.filename}': {reason}"
    return f"Failed to create archive: {exc}"
