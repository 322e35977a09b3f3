"""Filesystem-backed storage port implementation."""

from __future__ import annotations

from pathlib import Path

from shelf.app.ports import StoragePort


class FileSystemStorageAdapter(StoragePort):
    """Adapter that performs direct filesystem reads."""

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")
