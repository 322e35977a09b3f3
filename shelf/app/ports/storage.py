"""Storage port interface for reading operator-supplied inputs."""

from pathlib import Path
from typing import Protocol


class StoragePort(Protocol):
    """Port interface for storage operations.

    Abstracts filesystem reads to enable testing and alternative backends.

    Side effects: Reads files (offline).
    """

    def read_text(self, path: Path) -> str:
        """Read text file.

        Args:
            path: File path

        Returns:
            File contents as string
        """
        ...
