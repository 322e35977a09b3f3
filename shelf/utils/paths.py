"""Path utilities for entry naming and normalization."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath


def absolute_path(path: Path | str, base: Path | None = None) -> Path:
    """Return ``path`` as a normalized absolute path.

    Symlinks are not followed, so the entry name reflects the path the
    operator typed rather than the link target.
    """
    if base is None:
        base = Path.cwd()
    return Path(os.path.normpath(os.path.join(base, os.fspath(path))))


def is_within(path: Path, root: Path) -> bool:
    """Return True when ``path`` equals or lies underneath ``root``."""
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def entry_name_for(path: Path, root: Path | None) -> str:
    """Compute the archive entry name for ``path``.

    Args:
        path: Absolute source path
        root: Absolute root to strip, or None to flatten to the base name

    Returns:
        POSIX-style entry name

    Raises:
        ValueError: If ``path`` is not inside ``root``
    """
    if root is None:
        return path.name

    if not is_within(path, root):
        raise ValueError(f"Input path {path} is outside root {root}")

    relative = path.relative_to(root)
    return PurePosixPath(*relative.parts).as_posix()
