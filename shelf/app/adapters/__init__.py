"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .sink import FileOutputSink, StdoutOutputSink
from .storage import FileSystemStorageAdapter
from .tar_encoder import TarArchiveEncoder
from .zip_encoder import ZipArchiveEncoder

__all__ = [
    "FileOutputSink",
    "FileSystemStorageAdapter",
    "StdoutOutputSink",
    "TarArchiveEncoder",
    "ZipArchiveEncoder",
]
