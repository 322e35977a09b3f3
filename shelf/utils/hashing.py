"""Hashing utilities for payload digests."""

import hashlib
from typing import BinaryIO


class HashingWriter:
    """Write-through wrapper that hashes and counts every byte written."""

    def __init__(self, target: BinaryIO) -> None:
        self._target = target
        self._sha256 = hashlib.sha256()
        self.bytes_written = 0

    def write(self, data: bytes) -> int:
        written = self._target.write(data)
        self._sha256.update(data)
        self.bytes_written += len(data)
        return len(data) if written is None else written

    def flush(self) -> None:
        self._target.flush()

    def hexdigest(self) -> str:
        return self._sha256.hexdigest()
