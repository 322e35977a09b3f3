"""Output sink port."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import BinaryIO, Protocol


class OutputSinkPort(Protocol):
    """Destination for the generated script.

    ``open()`` returns a context manager yielding a binary writer. Content
    becomes visible at the destination only when the block exits without an
    exception.
    """

    def describe(self) -> str:
        """Human-readable destination used in operator messages."""
        ...

    def open(self) -> AbstractContextManager[BinaryIO]:
        """Open the sink for a single write pass."""
        ...
