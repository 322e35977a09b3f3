"""Archive encoder port."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, BinaryIO, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from shelf.app.entry_resolver import ArchiveEntry


class ArchiveEncoderPort(Protocol):
    """Port interface for serializing entries into an archive byte stream.

    Side effects: Reads every entry's source file exactly once, lazily.
    """

    archive_format: str

    def encode(
        self,
        entries: Sequence[ArchiveEntry],
        destination: BinaryIO,
        *,
        compression_level: int | None,
    ) -> None:
        """Write an archive containing ``entries`` to ``destination``.

        Args:
            entries: Entries in archive order
            destination: Writable binary stream (never seeked)
            compression_level: 0-9, 0 disables compression, None uses the format default

        Raises:
            OSError: If a source file cannot be read or the destination write fails
        """
        ...
