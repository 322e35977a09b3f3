"""Tests for the tar and zip archive encoders."""

from __future__ import annotations

import io
import os
import stat
import tarfile
import zipfile
from pathlib import Path

import pytest

from shelf.app.adapters import TarArchiveEncoder, ZipArchiveEncoder
from shelf.app.entry_resolver import resolve_entries
from shelf.utils.hashing import HashingWriter


def _encode(encoder, entries, level) -> bytes:
    buffer = io.BytesIO()
    encoder.encode(entries, HashingWriter(buffer), compression_level=level)
    return buffer.getvalue()


def test_tar_default_is_gzip_compressed(sample_files: list[Path]) -> None:
    data = _encode(TarArchiveEncoder(), resolve_entries(sample_files), None)

    assert data[:2] == b"\x1f\x8b"
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
        assert archive.getnames() == ["a.sh", "b.txt"]


def test_tar_level_zero_is_uncompressed(sample_files: list[Path]) -> None:
    data = _encode(TarArchiveEncoder(), resolve_entries(sample_files), 0)

    assert data[257:262] == b"ustar"
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as archive:
        members = {member.name: member for member in archive.getmembers()}
        assert stat.S_IMODE(members["a.sh"].mode) == 0o755
        assert stat.S_IMODE(members["b.txt"].mode) == 0o644
        extracted = archive.extractfile("b.txt")
        assert extracted is not None
        assert extracted.read() == sample_files[1].read_bytes()


def test_tar_preserves_nested_entry_names(nested_files: Path) -> None:
    entries = resolve_entries(
        [nested_files / "src" / "a.txt", nested_files / "out" / "a.txt"], root=nested_files
    )
    data = _encode(TarArchiveEncoder(), entries, 9)

    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
        assert archive.getnames() == ["src/a.txt", "out/a.txt"]
        extracted = archive.extractfile("out/a.txt")
        assert extracted is not None
        assert extracted.read() == b"output copy\n"


def test_zip_modes_and_contents(sample_files: list[Path]) -> None:
    data = _encode(ZipArchiveEncoder(), resolve_entries(sample_files), None)

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.namelist() == ["a.sh", "b.txt"]
        infos = {info.filename: info for info in archive.infolist()}
        assert infos["a.sh"].compress_type == zipfile.ZIP_DEFLATED
        assert stat.S_IMODE(infos["a.sh"].external_attr >> 16) == 0o755
        assert stat.S_IMODE(infos["b.txt"].external_attr >> 16) == 0o644
        assert infos["a.sh"].create_system == 3
        assert archive.read("a.sh") == sample_files[0].read_bytes()
        assert archive.testzip() is None


def test_zip_level_zero_stores_entries(sample_files: list[Path]) -> None:
    data = _encode(ZipArchiveEncoder(), resolve_entries(sample_files), 0)

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert {info.compress_type for info in archive.infolist()} == {zipfile.ZIP_STORED}
        assert archive.read("b.txt") == sample_files[1].read_bytes()


@pytest.mark.parametrize("encoder", [TarArchiveEncoder(), ZipArchiveEncoder()])
def test_level_zero_differs_in_size_but_not_content(encoder, sample_files: list[Path]) -> None:
    entries = resolve_entries(sample_files)

    stored = _encode(encoder, entries, 0)
    compressed = _encode(encoder, entries, 9)

    assert len(stored) != len(compressed)
    if encoder.archive_format == "zip":
        with zipfile.ZipFile(io.BytesIO(stored)) as a, zipfile.ZipFile(io.BytesIO(compressed)) as b:
            assert [a.read(n) for n in a.namelist()] == [b.read(n) for n in b.namelist()]
    else:
        with tarfile.open(fileobj=io.BytesIO(stored), mode="r:") as a, tarfile.open(
            fileobj=io.BytesIO(compressed), mode="r:gz"
        ) as b:
            for name in ("a.sh", "b.txt"):
                left, right = a.extractfile(name), b.extractfile(name)
                assert left is not None and right is not None
                assert left.read() == right.read()


@pytest.mark.parametrize("encoder", [TarArchiveEncoder(), ZipArchiveEncoder()])
def test_missing_source_file_raises(encoder, sample_files: list[Path], temp_dir: Path) -> None:
    entries = resolve_entries([*sample_files, temp_dir / "vanished.txt"])

    with pytest.raises(FileNotFoundError):
        _encode(encoder, entries, None)


def test_zip_offsets_are_relative_to_payload(sample_files: list[Path]) -> None:
    buffer = io.BytesIO()
    buffer.write(b"#!/bin/sh\nexit\n")
    start = buffer.tell()

    ZipArchiveEncoder().encode(
        resolve_entries(sample_files), HashingWriter(buffer), compression_level=None
    )

    with zipfile.ZipFile(io.BytesIO(buffer.getvalue()[start:])) as archive:
        assert archive.testzip() is None
        assert archive.read("b.txt") == sample_files[1].read_bytes()


def test_zip_accepts_mtimes_before_1980(sample_files: list[Path]) -> None:
    os.utime(sample_files[1], (0, 0))

    data = _encode(ZipArchiveEncoder(), resolve_entries(sample_files), None)

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.getinfo("b.txt").date_time == (1980, 1, 1, 0, 0, 0)
        assert stat.S_IMODE(archive.getinfo("b.txt").external_attr >> 16) == 0o644
        assert archive.read("b.txt") == sample_files[1].read_bytes()
