"""Port interfaces for the shelf application layer.

These protocol interfaces define contracts for adapters.
Packaging logic depends on these ports, never on concrete implementations.
"""

__all__ = [
    "ArchiveEncoderPort",
    "OutputSinkPort",
    "StoragePort",
]

from shelf.app.ports.archive import ArchiveEncoderPort
from shelf.app.ports.sink import OutputSinkPort
from shelf.app.ports.storage import StoragePort
