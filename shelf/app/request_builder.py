"""Request validation: turn raw option values into a ``PackagingRequest``.

Every configuration problem is checked independently and reported together.
Script files are read here; archive inputs are only resolved, never read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

from shelf.app.entry_resolver import DEFAULT_EXECUTABLE_SUFFIXES, ArchiveEntry, resolve_entries
from shelf.app.ports import StoragePort
from shelf.errors import ConfigurationError, InputError

logger = logging.getLogger(__name__)

ArchiveFormat = Literal["tar", "zip"]
ARCHIVE_FORMATS: tuple[str, ...] = get_args(ArchiveFormat)
COMPRESSION_LEVELS = range(0, 10)


@dataclass(slots=True)
class RawOptions:
    """Option values as collected from the command line."""

    archive_type: str | None = "tar"
    compress_level: int | str | None = None
    pre_extract: str | None = None
    post_extract: str | None = None
    pre_extract_file: Path | None = None
    post_extract_file: Path | None = None
    omit_header: bool = False
    root: Path | None = None
    files: list[Path] = field(default_factory=list)
    output: Path | None = None


class PackagingRequest(BaseModel):
    """Validated, immutable description of one build."""

    model_config = ConfigDict(frozen=True)

    archive_format: ArchiveFormat = "tar"
    compression_level: int | None = Field(default=None, ge=0, le=9)
    pre_extraction_script: str = ""
    post_extraction_script: str = Field(..., min_length=1)
    omit_header: bool = False
    root_path: Path | None = None
    entries: tuple[ArchiveEntry, ...] = Field(..., min_length=1)
    output_path: Path | None = Field(
        default=None,
        description="Destination file; None writes to standard output",
    )
    interpreter: str = "/bin/sh"
    temp_prefix: str = "shelf"

    @property
    def compressed(self) -> bool:
        """False only when compression was explicitly disabled with level 0."""
        return self.compression_level != 0


def parse_compress_level(value: int | str | None) -> int | None:
    """Parse a compression level, raising ValueError outside 0-9."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, str):
        text = value.strip()
        if not text.isdigit():
            raise ValueError(value)
        value = int(text)
    if value not in COMPRESSION_LEVELS:
        raise ValueError(value)
    return value


def _read_script(storage: StoragePort, path: Path, label: str) -> str:
    try:
        return storage.read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Failed to read {label} script '{path}'") from exc


def build_request(
    options: RawOptions,
    storage: StoragePort,
    *,
    executable_suffixes: tuple[str, ...] | list[str] = DEFAULT_EXECUTABLE_SUFFIXES,
    interpreter: str = "/bin/sh",
    temp_prefix: str = "shelf",
    base: Path | None = None,
) -> PackagingRequest:
    """Validate ``options`` and produce a ``PackagingRequest``.

    Args:
        options: Raw option values
        storage: Port used to read script files
        executable_suffixes: Suffixes embedded with executable mode
        interpreter: Shebang interpreter for the generated script
        temp_prefix: Prefix of the run-time temporary directory
        base: Directory relative input paths are resolved against

    Returns:
        Fully validated request

    Raises:
        ConfigurationError: Bad flag values or missing required inputs
        InputError: Unreadable script file or input outside the root
        DuplicateEntryError: Two inputs map to the same entry name
    """
    problems: list[str] = []

    archive_format = options.archive_type
    if archive_format not in ARCHIVE_FORMATS:
        problems.append("Invalid archive type. Values tar or zip allowed")

    compression_level: int | None = None
    try:
        compression_level = parse_compress_level(options.compress_level)
    except ValueError:
        problems.append("Invalid compression level. Values 0-9 allowed")

    if not options.files:
        problems.append("No files to embed specified")

    if options.post_extract_file is None and not options.post_extract:
        problems.append("No post extraction script specified")

    if problems:
        raise ConfigurationError(problems)

    pre_script = options.pre_extract or ""
    if options.pre_extract_file is not None:
        pre_script = _read_script(storage, options.pre_extract_file, "pre-extraction")

    post_script = options.post_extract or ""
    if options.post_extract_file is not None:
        post_script = _read_script(storage, options.post_extract_file, "post-extraction")
        if not post_script.strip():
            raise ConfigurationError(
                [f"Post extraction script '{options.post_extract_file}' is empty"]
            )

    entries = resolve_entries(
        options.files,
        root=options.root,
        executable_suffixes=executable_suffixes,
        base=base,
    )

    request = PackagingRequest(
        archive_format=archive_format,  # type: ignore[arg-type]
        compression_level=compression_level,
        pre_extraction_script=pre_script,
        post_extraction_script=post_script,
        omit_header=options.omit_header,
        root_path=options.root,
        entries=tuple(entries),
        output_path=options.output,
        interpreter=interpreter,
        temp_prefix=temp_prefix,
    )
    logger.debug(
        "Request: %s archive, level %s, %d entries",
        request.archive_format,
        request.compression_level,
        len(request.entries),
    )
    return request
