"""Error taxonomy for packaging failures.

Every failure is fatal for the current invocation. The CLI reports
``ShelfError.lines()`` to the operator and exits non-zero.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class ShelfError(Exception):
    """Base class for all packaging errors."""

    def lines(self) -> list[str]:
        """Return the operator-facing message, one entry per output line."""
        return str(self).splitlines() or [type(self).__name__]


class ConfigurationError(ShelfError):
    """Invalid flag values or missing required inputs."""

    def __init__(self, problems: Iterable[str]) -> None:
        self.problems = list(problems)
        super().__init__("\n".join(self.problems))


class InputError(ShelfError):
    """An input path or script could not be used."""


class DuplicateEntryError(InputError):
    """Two or more source files map to the same entry name."""

    def __init__(self, collisions: dict[str, list[Path]]) -> None:
        self.collisions = collisions
        lines = ["Archive contains duplicate files"]
        for name, sources in collisions.items():
            lines.append(f"Archive would contain path {name} {len(sources)} times")
            lines.extend(f"  From {source}" for source in sources)
        super().__init__("\n".join(lines))


class EncodingError(ShelfError):
    """Reading, encoding or writing the payload failed."""
