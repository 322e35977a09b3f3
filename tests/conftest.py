"""Pytest configuration and fixtures."""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from shelf.app.adapters import FileSystemStorageAdapter
from shelf.config import Settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def storage() -> FileSystemStorageAdapter:
    return FileSystemStorageAdapter()


@pytest.fixture
def sample_files(temp_dir: Path) -> list[Path]:
    """Create a shell script and a text file to embed."""
    src = temp_dir / "src"
    src.mkdir()

    script = src / "a.sh"
    script.write_text("#!/bin/sh\necho from a.sh\n")

    text = src / "b.txt"
    text.write_bytes(b"plain text\n" * 64)

    return [script, text]


@pytest.fixture
def nested_files(temp_dir: Path) -> Path:
    """Create two files sharing a base name under different directories."""
    root = temp_dir / "proj"
    (root / "src").mkdir(parents=True)
    (root / "out").mkdir(parents=True)

    (root / "src" / "a.txt").write_text("source copy\n")
    (root / "out" / "a.txt").write_text("output copy\n")

    return root


@pytest.fixture
def override_settings() -> Generator[Settings, None, None]:
    """Provide isolated shelf settings scoped to tests."""

    import shelf.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(_env_file=None)
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings
