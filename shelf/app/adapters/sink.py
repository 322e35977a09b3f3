"""Output sinks for generated scripts."""

from __future__ import annotations

import shutil
import sys
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from shelf.app.ports import OutputSinkPort
from shelf.utils.atomic import atomic_output

SCRIPT_MODE = 0o755


class FileOutputSink(OutputSinkPort):
    """Write the script to a file, replacing it atomically on success."""

    def __init__(self, path: Path, *, mode: int = SCRIPT_MODE) -> None:
        self._path = Path(path)
        self._mode = mode

    def describe(self) -> str:
        return str(self._path)

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        with atomic_output(self._path, mode=self._mode) as handle:
            yield handle


def _stdout_buffer() -> BinaryIO:
    return sys.stdout.buffer


class StdoutOutputSink(OutputSinkPort):
    """Buffer the script and copy it to standard output once complete."""

    def __init__(
        self,
        stream_factory: Callable[[], BinaryIO] = _stdout_buffer,
        *,
        spool_bytes: int = 16 * 1024 * 1024,
    ) -> None:
        self._stream_factory = stream_factory
        self._spool_bytes = spool_bytes

    def describe(self) -> str:
        return "standard output"

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        with tempfile.SpooledTemporaryFile(max_size=self._spool_bytes, mode="w+b") as spool:
            yield spool  # type: ignore[misc]
            spool.seek(0)
            stream = self._stream_factory()
            shutil.copyfileobj(spool, stream)
            stream.flush()
