"""Self-extracting script assembly.

The generated file is a POSIX shell preamble followed by a marker line and
the raw archive bytes. The preamble has to name the byte position where the
archive starts, which depends on the preamble's own length. It is therefore
rendered in two stages: first with a fixed-width placeholder in the offset
field, then the measured length is written into exactly that byte range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shelf import __version__
from shelf.app.ports import ArchiveEncoderPort, OutputSinkPort
from shelf.errors import EncodingError
from shelf.utils.hashing import HashingWriter

if TYPE_CHECKING:  # pragma: no cover
    from shelf.app.request_builder import PackagingRequest

logger = logging.getLogger(__name__)

ARCHIVE_MARKER = "__SHELF_ARCHIVE_BELOW__"
OFFSET_VARIABLE = "SHELF_ARCHIVE_START"
OFFSET_WIDTH = 12
_PLACEHOLDER = "#" * OFFSET_WIDTH

_SCRIPT_PATH = """\
case "$0" in
  /*) SHELF_SCRIPT="$0" ;;
  *) SHELF_SCRIPT="$(pwd)/$0" ;;
esac
"""

_SETUP = """\
{offset_variable}={placeholder}
{requirements}SHELF_PAYLOAD=
SHELF_TMPDIR=$(mktemp -d "${{TMPDIR:-/tmp}}/{temp_prefix}.XXXXXXXXXX") || {{
  echo "shelf: unable to create a temporary directory" >&2
  exit 1
}}
trap 'shelf_status=$?; cd / && rm -rf "$SHELF_TMPDIR"; [ -z "$SHELF_PAYLOAD" ] || rm -f "$SHELF_PAYLOAD"; exit $shelf_status' EXIT
trap 'exit 129' HUP
trap 'exit 130' INT
trap 'exit 143' TERM
"""

_EXTRACT_TAR = """\
tail -c "+${offset_variable}" "$SHELF_SCRIPT" | tar -x{gzip_flag}f - -C "$SHELF_TMPDIR" || {{
  echo "shelf: failed to extract the embedded archive" >&2
  exit 1
}}
"""

_REQUIRE_UNZIP = """\
command -v unzip >/dev/null 2>&1 || {
  echo "shelf: unzip is required to extract this package" >&2
  exit 1
}
"""

_EXTRACT_ZIP = """\
SHELF_PAYLOAD=$(mktemp "${{TMPDIR:-/tmp}}/{temp_prefix}-payload.XXXXXXXXXX") || exit 1
tail -c "+${offset_variable}" "$SHELF_SCRIPT" > "$SHELF_PAYLOAD" &&
  unzip -q -o "$SHELF_PAYLOAD" -d "$SHELF_TMPDIR" || {{
  echo "shelf: failed to extract the embedded archive" >&2
  exit 1
}}
rm -f "$SHELF_PAYLOAD"
SHELF_PAYLOAD=
"""

_ENTER = """\
cd "$SHELF_TMPDIR" || exit 1
"""

_FINISH = """\
exit
{marker}
"""


@dataclass(frozen=True, slots=True)
class ScriptPrefix:
    """Rendered preamble with the archive offset already substituted."""

    data: bytes
    offset_field: slice

    @property
    def archive_offset(self) -> int:
        """Zero-based byte offset at which the archive starts."""
        return len(self.data)


@dataclass(frozen=True, slots=True)
class AssembledScript:
    """Summary of a script written to a sink."""

    archive_offset: int
    archive_size: int
    archive_sha256: str

    @property
    def total_size(self) -> int:
        return self.archive_offset + self.archive_size


def _terminated(script: str) -> str:
    if script and not script.endswith("\n"):
        return script + "\n"
    return script


def _render_bootstrap(request: PackagingRequest) -> str:
    fields = {
        "offset_variable": OFFSET_VARIABLE,
        "placeholder": _PLACEHOLDER,
        "temp_prefix": request.temp_prefix,
    }

    if request.archive_format == "zip":
        setup = _SETUP.format(requirements=_REQUIRE_UNZIP, **fields)
        extract = _EXTRACT_ZIP.format(**fields)
    else:
        setup = _SETUP.format(requirements="", **fields)
        extract = _EXTRACT_TAR.format(
            gzip_flag="z" if request.compressed else "",
            **fields,
        )

    return setup + extract + _ENTER


def render_prefix(request: PackagingRequest, *, version: str = __version__) -> ScriptPrefix:
    """Render everything that precedes the archive bytes.

    Segments in order: shebang, optional header, script path capture, the
    pre-extraction script, bootstrap, the post-extraction script, the final
    ``exit`` and the marker line.
    """
    head = f"#!{request.interpreter}\n"
    if not request.omit_header:
        head += f"# Created with shelf v{version}\n"
    head += _SCRIPT_PATH + _terminated(request.pre_extraction_script)

    bootstrap = _render_bootstrap(request)
    tail = _terminated(request.post_extraction_script) + _FINISH.format(marker=ARCHIVE_MARKER)

    head_bytes = head.encode("utf-8")
    bootstrap_bytes = bootstrap.encode("utf-8")
    tail_bytes = tail.encode("utf-8")

    # Locate the field inside the bootstrap segment only, so placeholder-like
    # text in the operator's scripts can never be mistaken for it.
    field_start = len(head_bytes) + bootstrap_bytes.index(_PLACEHOLDER.encode("ascii"))
    offset_field = slice(field_start, field_start + OFFSET_WIDTH)

    rendered = bytearray(head_bytes + bootstrap_bytes + tail_bytes)
    # tail -c +N counts from 1
    archive_start = str(len(rendered) + 1).ljust(OFFSET_WIDTH).encode("ascii")
    if len(archive_start) != OFFSET_WIDTH:
        raise EncodingError(f"Script preamble too large ({len(rendered)} bytes)")
    rendered[offset_field] = archive_start

    return ScriptPrefix(data=bytes(rendered), offset_field=offset_field)


def write_script(
    request: PackagingRequest,
    encoder: ArchiveEncoderPort,
    sink: OutputSinkPort,
    *,
    version: str = __version__,
) -> AssembledScript:
    """Write the preamble and the encoded archive to ``sink``.

    The preamble is complete before any archive byte is produced. The sink
    only publishes its contents if encoding finishes without an exception.
    """
    prefix = render_prefix(request, version=version)
    logger.debug("Preamble is %d bytes; archive starts at offset %d", len(prefix.data), prefix.archive_offset)

    with sink.open() as handle:
        handle.write(prefix.data)
        # Non-seekable wrapper: archive writers must see offsets relative to the payload.
        payload = HashingWriter(handle)
        encoder.encode(
            request.entries,
            payload,  # type: ignore[arg-type]
            compression_level=request.compression_level,
        )
        payload.flush()

    return AssembledScript(
        archive_offset=prefix.archive_offset,
        archive_size=payload.bytes_written,
        archive_sha256=payload.hexdigest(),
    )
