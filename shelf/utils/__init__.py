"""Utility modules for common operations."""

from shelf.utils.atomic import atomic_output
from shelf.utils.hashing import HashingWriter
from shelf.utils.paths import absolute_path, entry_name_for, is_within

__all__ = [
    "HashingWriter",
    "absolute_path",
    "atomic_output",
    "entry_name_for",
    "is_within",
]
