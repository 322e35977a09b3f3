"""Application layer for shelf.

This layer orchestrates packaging without direct filesystem I/O.
All side effects are delegated to adapters via port interfaces.
"""

__all__ = [
    "PackageResult",
    "PackageService",
    "PackagingRequest",
    "RawOptions",
    "build_request",
]

from shelf.app.package_service import PackageResult, PackageService
from shelf.app.request_builder import PackagingRequest, RawOptions, build_request
