"""Tar archive encoder with optional gzip compression."""

from __future__ import annotations

import gzip
import logging
import os
import tarfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, BinaryIO

from shelf.app.ports import ArchiveEncoderPort

if TYPE_CHECKING:  # pragma: no cover
    from shelf.app.entry_resolver import ArchiveEntry

logger = logging.getLogger(__name__)

DEFAULT_GZIP_LEVEL = 6


class TarArchiveEncoder(ArchiveEncoderPort):
    """Stream entries into a tar archive, gzip-compressed unless level is 0."""

    archive_format = "tar"

    def __init__(self, default_level: int = DEFAULT_GZIP_LEVEL) -> None:
        self._default_level = default_level

    @contextmanager
    def _compressed(self, destination: BinaryIO, level: int) -> Iterator[BinaryIO]:
        if level == 0:
            yield destination
            return

        # Empty filename and zero mtime keep the gzip header free of host details.
        with gzip.GzipFile(
            filename="",
            mode="wb",
            compresslevel=level,
            fileobj=destination,
            mtime=0,
        ) as stream:
            yield stream  # type: ignore[misc]

    def encode(
        self,
        entries: Sequence[ArchiveEntry],
        destination: BinaryIO,
        *,
        compression_level: int | None,
    ) -> None:
        level = self._default_level if compression_level is None else compression_level

        with self._compressed(destination, level) as stream:
            with tarfile.open(fileobj=stream, mode="w|", format=tarfile.PAX_FORMAT) as archive:
                for entry in entries:
                    with entry.source_path.open("rb") as handle:
                        stat_result = os.fstat(handle.fileno())
                        info = tarfile.TarInfo(name=entry.entry_name)
                        info.size = stat_result.st_size
                        info.mode = entry.mode
                        info.mtime = int(stat_result.st_mtime)
                        info.type = tarfile.REGTYPE
                        info.uid = info.gid = 0
                        info.uname = info.gname = ""
                        archive.addfile(info, handle)
                    logger.debug("Added %s (%d bytes) to tar", entry.entry_name, info.size)
