"""Read back the payload embedded in a generated script."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from shelf.app.script_assembler import ARCHIVE_MARKER, OFFSET_VARIABLE, OFFSET_WIDTH
from shelf.errors import InputError

_OFFSET_LINE = re.compile(
    rb"^" + OFFSET_VARIABLE.encode("ascii") + rb"=([0-9][0-9 ]{" + str(OFFSET_WIDTH - 1).encode("ascii") + rb"})$",
    re.MULTILINE,
)
_GZIP_MAGIC = b"\x1f\x8b"
_ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06")
_TAR_MAGIC_OFFSET = 257


@dataclass(frozen=True, slots=True)
class EmbeddedPayload:
    """Archive located inside a generated script."""

    offset: int
    archive_format: str
    compressed: bool
    data: bytes


def _detect_format(data: bytes) -> tuple[str, bool]:
    if data.startswith(_GZIP_MAGIC):
        return "tar", True
    if data.startswith(_ZIP_MAGICS):
        return "zip", data[8:10] != b"\x00\x00"
    if data[_TAR_MAGIC_OFFSET : _TAR_MAGIC_OFFSET + 5] == b"ustar":
        return "tar", False
    raise InputError("Embedded payload is neither a tar nor a zip archive")


def read_payload(script: bytes) -> EmbeddedPayload:
    """Locate and classify the archive embedded in ``script``.

    Raises:
        InputError: If ``script`` was not produced by shelf
    """
    candidates = [int(match.group(1).strip()) - 1 for match in _OFFSET_LINE.finditer(script)]
    if not candidates:
        raise InputError("No archive offset found; not a shelf script")

    # Operator scripts may contain look-alike lines; only the real field
    # points just past the marker.
    marker = f"\n{ARCHIVE_MARKER}\n".encode("ascii")
    for offset in candidates:
        if offset >= len(marker) and script[offset - len(marker) : offset] == marker:
            break
    else:
        raise InputError(f"Archive marker does not precede offset {candidates[-1]}")

    data = script[offset:]
    archive_format, compressed = _detect_format(data)
    return EmbeddedPayload(
        offset=offset,
        archive_format=archive_format,
        compressed=compressed,
        data=data,
    )


def read_payload_file(path: Path) -> EmbeddedPayload:
    """Read ``path`` and locate its embedded archive."""
    try:
        script = Path(path).read_bytes()
    except OSError as exc:
        raise InputError(f"Failed to read script '{path}'") from exc
    return read_payload(script)
