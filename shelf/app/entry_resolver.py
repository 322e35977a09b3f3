"""Entry resolution: map input paths to archive entries.

Each input path becomes an ``ArchiveEntry`` with an entry name (relative to
an optional root, otherwise flattened to the base name) and a POSIX mode.
Name collisions are detected across the whole request before any archive
bytes are produced.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field

from shelf.errors import DuplicateEntryError, InputError
from shelf.utils.paths import absolute_path, entry_name_for

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755
DEFAULT_MODE = 0o644
DEFAULT_EXECUTABLE_SUFFIXES: tuple[str, ...] = (".sh",)


class ArchiveEntry(BaseModel):
    """One file to embed in the archive."""

    model_config = ConfigDict(frozen=True)

    entry_name: str = Field(..., min_length=1, description="Path inside the archive")
    source_path: Path = Field(..., description="Absolute path the bytes are read from")
    mode: int = Field(..., ge=0, le=0o7777, description="POSIX permission bits")


def classify_mode(
    entry_name: str,
    executable_suffixes: Iterable[str] = DEFAULT_EXECUTABLE_SUFFIXES,
) -> int:
    """Return the permission bits for ``entry_name``.

    Files whose suffix matches one of ``executable_suffixes`` exactly
    (case-sensitive) are executable, everything else is plain read/write.
    """
    suffix = PurePosixPath(entry_name).suffix
    if suffix and suffix in set(executable_suffixes):
        return EXECUTABLE_MODE
    return DEFAULT_MODE


def find_collisions(entries: Sequence[ArchiveEntry]) -> dict[str, list[Path]]:
    """Group entries by name and return only the names used more than once."""
    sources: dict[str, list[Path]] = {}
    for entry in entries:
        sources.setdefault(entry.entry_name, []).append(entry.source_path)

    if len(sources) == len(entries):
        return {}
    return {name: paths for name, paths in sources.items() if len(paths) > 1}


def resolve_entries(
    files: Sequence[Path | str],
    *,
    root: Path | str | None = None,
    executable_suffixes: Iterable[str] = DEFAULT_EXECUTABLE_SUFFIXES,
    base: Path | None = None,
) -> list[ArchiveEntry]:
    """Resolve every input path to an ``ArchiveEntry``.

    Args:
        files: Input paths in archive order
        root: Optional root stripped from entry names
        executable_suffixes: Suffixes that receive executable mode
        base: Directory relative paths are resolved against (defaults to cwd)

    Returns:
        Entries in the order supplied

    Raises:
        InputError: If an input path lies outside ``root``
        DuplicateEntryError: If two inputs map to the same entry name
    """
    suffixes = tuple(executable_suffixes)
    resolved_root = absolute_path(root, base) if root is not None else None

    entries: list[ArchiveEntry] = []
    for raw in files:
        source = absolute_path(raw, base)
        try:
            name = entry_name_for(source, resolved_root)
        except ValueError as exc:
            raise InputError(str(exc)) from exc
        if not name or name == ".":
            raise InputError(f"Input path {source} does not name a file")

        entry = ArchiveEntry(
            entry_name=name,
            source_path=source,
            mode=classify_mode(name, suffixes),
        )
        logger.debug("Resolved %s -> %s (mode %o)", source, entry.entry_name, entry.mode)
        entries.append(entry)

    collisions = find_collisions(entries)
    if collisions:
        raise DuplicateEntryError(collisions)

    return entries
