"""Zip archive encoder."""

from __future__ import annotations

import logging
import stat
from collections.abc import Sequence
from typing import TYPE_CHECKING, BinaryIO
from zipfile import ZIP_DEFLATED, ZIP_STORED, ZipFile

from shelf.app.ports import ArchiveEncoderPort

if TYPE_CHECKING:  # pragma: no cover
    from shelf.app.entry_resolver import ArchiveEntry

logger = logging.getLogger(__name__)

_UNIX_CREATE_SYSTEM = 3


class ZipArchiveEncoder(ArchiveEncoderPort):
    """Stream entries into a zip archive, deflated unless level is 0.

    The destination must not be seekable from the archive's point of view:
    zip offsets are then relative to the start of the payload rather than the
    start of the script, which keeps the carved payload a valid zip file.
    """

    archive_format = "zip"

    def encode(
        self,
        entries: Sequence[ArchiveEntry],
        destination: BinaryIO,
        *,
        compression_level: int | None,
    ) -> None:
        compression = ZIP_STORED if compression_level == 0 else ZIP_DEFLATED
        level = None if compression_level == 0 else compression_level

        # strict_timestamps=False clamps mtimes before 1980 instead of failing.
        with ZipFile(
            destination,
            mode="w",
            compression=compression,
            compresslevel=level,
            strict_timestamps=False,
        ) as archive:
            for entry in entries:
                archive.write(entry.source_path, arcname=entry.entry_name)
                # The mode lives in the central directory, written on close.
                info = archive.getinfo(entry.entry_name)
                info.create_system = _UNIX_CREATE_SYSTEM
                info.external_attr = (stat.S_IFREG | entry.mode) << 16
                logger.debug("Added %s (%d bytes) to zip", entry.entry_name, info.file_size)
