"""Atomic file output helpers."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


@contextmanager
def atomic_output(path: Path, *, mode: int = 0o644) -> Iterator[BinaryIO]:
    """Yield a binary handle whose contents replace ``path`` on success.

    The write goes to a temporary file in the destination directory which is
    flushed, fsynced and ``os.replace``d into place once the block exits
    cleanly. If the block raises, the temporary file is removed and
    ``path`` is left untouched.
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=str(destination.parent),
        prefix=f".{destination.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, mode & ~_current_umask())
        os.replace(tmp_path, destination)
    except BaseException:
        if Path(tmp_path).exists():
            Path(tmp_path).unlink()
        raise
