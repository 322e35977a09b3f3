"""CLI integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from shelf import __version__
from shelf.app.inspect import read_payload, read_payload_file
from shelf.cli import app
from shelf.config import set_settings

runner = CliRunner()


def test_help_exits_zero(override_settings) -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "--post-extract" in result.stdout
    assert "--compress-level" in result.stdout


def test_short_help_alias(override_settings) -> None:
    result = runner.invoke(app, ["-h"])

    assert result.exit_code == 0
    assert "self extracting" in result.stdout


def test_version(override_settings) -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == f"shelf version {__version__}"


def test_writes_script_to_stdout(override_settings, sample_files: list[Path]) -> None:
    result = runner.invoke(app, ["--post-extract", "echo done", *map(str, sample_files)])

    assert result.exit_code == 0, result.stderr
    script = result.stdout_bytes
    assert script.startswith(b"#!/bin/sh\n")
    payload = read_payload(script)
    assert payload.archive_format == "tar"
    assert "Wrote 2 entries (tar) to standard output" in result.stderr


def test_writes_script_to_file(override_settings, sample_files: list[Path], temp_dir: Path) -> None:
    output = temp_dir / "installer.sh"

    result = runner.invoke(
        app,
        [
            "-t",
            "zip",
            "-c",
            "0",
            "-q",
            "-b",
            "echo done",
            "-o",
            str(output),
            "-f",
            str(sample_files[0]),
            "-f",
            str(sample_files[1]),
        ],
    )

    assert result.exit_code == 0, result.stderr
    assert result.stdout_bytes == b""
    payload = read_payload_file(output)
    assert payload.archive_format == "zip"
    assert payload.compressed is False
    assert b"Created with shelf" not in output.read_bytes()[: payload.offset]


def test_post_extract_file_option(override_settings, sample_files: list[Path], temp_dir: Path) -> None:
    script = temp_dir / "install.sh"
    script.write_text("echo from-file\n")

    result = runner.invoke(
        app,
        ["-b", "echo inline", "-m", str(script), *map(str, sample_files)],
    )

    assert result.exit_code == 0, result.stderr
    assert b"echo from-file\n" in result.stdout_bytes
    assert b"echo inline" not in result.stdout_bytes


def test_missing_post_extract_exits_one(override_settings, sample_files: list[Path]) -> None:
    result = runner.invoke(app, [*map(str, sample_files)])

    assert result.exit_code == 1
    assert "No post extraction script specified" in result.stderr
    assert result.stdout_bytes == b""


def test_no_arguments_reports_every_problem(override_settings) -> None:
    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert "No files to embed specified" in result.stderr
    assert "No post extraction script specified" in result.stderr


def test_invalid_type_and_level_exit_one(override_settings, sample_files: list[Path]) -> None:
    result = runner.invoke(
        app,
        ["--type", "rar", "--compress-level", "12", "-b", "true", str(sample_files[0])],
    )

    assert result.exit_code == 1
    assert "Invalid archive type. Values tar or zip allowed" in result.stderr
    assert "Invalid compression level. Values 0-9 allowed" in result.stderr


def test_duplicate_entries_exit_one(override_settings, nested_files: Path, temp_dir: Path) -> None:
    output = temp_dir / "installer.sh"
    first = nested_files / "src" / "a.txt"
    second = nested_files / "out" / "a.txt"

    result = runner.invoke(app, ["-b", "true", "-o", str(output), str(first), str(second)])

    assert result.exit_code == 1
    assert "Archive contains duplicate files" in result.stderr
    assert "Archive would contain path a.txt 2 times" in result.stderr
    assert f"From {first}" in result.stderr
    assert f"From {second}" in result.stderr
    assert not output.exists()


def test_root_avoids_duplicates(override_settings, nested_files: Path) -> None:
    result = runner.invoke(
        app,
        [
            "-b",
            "true",
            "--root",
            str(nested_files),
            str(nested_files / "src" / "a.txt"),
            str(nested_files / "out" / "a.txt"),
        ],
    )

    assert result.exit_code == 0, result.stderr


def test_unreadable_script_file_exits_one(override_settings, sample_files: list[Path], temp_dir: Path) -> None:
    missing = temp_dir / "nope.sh"

    result = runner.invoke(app, ["-m", str(missing), str(sample_files[0])])

    assert result.exit_code == 1
    assert f"Failed to read post-extraction script '{missing}'" in result.stderr


def test_unreadable_input_exits_one(override_settings, temp_dir: Path) -> None:
    output = temp_dir / "installer.sh"

    result = runner.invoke(app, ["-b", "true", "-o", str(output), str(temp_dir / "gone.txt")])

    assert result.exit_code == 1
    assert "gone.txt" in result.stderr
    assert not output.exists()


def test_settings_supply_defaults(override_settings, sample_files: list[Path]) -> None:
    override_settings.archive_type = "zip"
    override_settings.interpreter = "/bin/bash"

    result = runner.invoke(app, ["-b", "true", *map(str, sample_files)])

    assert result.exit_code == 0, result.stderr
    assert result.stdout_bytes.startswith(b"#!/bin/bash\n")
    assert read_payload(result.stdout_bytes).archive_format == "zip"


@pytest.mark.parametrize(
    ("variable", "value"),
    [("SHELF_COMPRESS_LEVEL", "abc"), ("SHELF_TEMP_PREFIX", "a/b")],
)
def test_invalid_environment_setting_exits_one(
    override_settings, sample_files: list[Path], temp_dir: Path, monkeypatch, variable, value
) -> None:
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv(variable, value)
    set_settings(None)
    output = temp_dir / "installer.sh"

    result = runner.invoke(app, ["-b", "true", "-o", str(output), *map(str, sample_files)])

    assert result.exit_code == 1
    assert result.stderr.startswith(f"Invalid setting {variable}: ")
    assert "Traceback" not in result.stderr
    assert not output.exists()
