"""shelf CLI application with Typer."""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from shelf import __version__
from shelf.app import RawOptions, build_request
from shelf.bootstrap import bootstrap_application
from shelf.errors import ShelfError

app = typer.Typer(
    name="shelf",
    help="A tool for creating self extracting shell scripts",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

EXAMPLE_USAGE = """\
Example usage:

  shelf --pre-extract "echo Hello" --post-extract "echo World; cat README.md" --output example.sh README.md
"""


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"shelf version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: int) -> logging.Logger:
    """Send shelf log records to stderr so stdout only carries the script."""
    level = logging.DEBUG if verbose >= 1 else logging.INFO

    logger = logging.getLogger("shelf")
    logger.setLevel(level)
    logger.propagate = False

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.handlers.clear()
    logger.addHandler(handler)
    return logger


def _fail(error: ShelfError) -> typer.Exit:
    for line in error.lines():
        typer.secho(line, fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


@app.command(epilog=EXAMPLE_USAGE)
def main(
    paths: Annotated[
        list[Path] | None,
        typer.Argument(help="List of files to embed in the script", show_default=False),
    ] = None,
    files: Annotated[
        list[Path] | None,
        typer.Option(
            "--files",
            "-f",
            help="File to embed in the script (repeatable)",
            metavar="<file>",
            show_default=False,
        ),
    ] = None,
    archive_type: Annotated[
        str | None,
        typer.Option(
            "--type",
            "-t",
            help="The type of archive to create. Must be tar or zip  [default: tar]",
            metavar="<tar|zip>",
            show_default=False,
        ),
    ] = None,
    compress_level: Annotated[
        str | None,
        typer.Option(
            "--compress-level",
            "-c",
            help="The compression level. A value of zero disables compression",
            metavar="<0-9>",
        ),
    ] = None,
    pre_extract: Annotated[
        str | None,
        typer.Option(
            "--pre-extract",
            "-a",
            help="Script contents to run prior to extracting the embedded archive",
        ),
    ] = None,
    post_extract: Annotated[
        str | None,
        typer.Option(
            "--post-extract",
            "-b",
            help="Script contents to run after extracting the embedded archive",
        ),
    ] = None,
    pre_extract_file: Annotated[
        Path | None,
        typer.Option(
            "--pre-extract-file",
            "-n",
            help="Script file to run prior to extracting the embedded archive. Overrides --pre-extract",
            metavar="<file>",
        ),
    ] = None,
    post_extract_file: Annotated[
        Path | None,
        typer.Option(
            "--post-extract-file",
            "-m",
            help="Script file to run after extracting the embedded archive. Overrides --post-extract",
            metavar="<file>",
        ),
    ] = None,
    omit_header: Annotated[
        bool,
        typer.Option(
            "--omit-header",
            "-q",
            help="If the 'created with...' notice should be omitted",
        ),
    ] = False,
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help=(
                "The root path for entries in the archive. Files will have this leading path "
                "stripped. If omitted all files will be added to the root"
            ),
            metavar="<path>",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="File to write output to. If omitted, output is written to standard out",
            metavar="<file>",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase log verbosity"),
    ] = 0,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Package files into a self extracting shell script."""
    _configure_logging(verbose)

    try:
        container = bootstrap_application()
    except ShelfError as exc:
        raise _fail(exc) from exc
    settings = container.settings

    options = RawOptions(
        archive_type=archive_type if archive_type is not None else settings.archive_type,
        compress_level=compress_level if compress_level is not None else settings.compress_level,
        pre_extract=pre_extract,
        post_extract=post_extract,
        pre_extract_file=pre_extract_file,
        post_extract_file=post_extract_file,
        omit_header=omit_header,
        root=root,
        files=[*(paths or []), *(files or [])],
        output=output,
    )

    try:
        request = build_request(
            options,
            container.storage_port,
            executable_suffixes=settings.executable_suffixes,
            interpreter=settings.interpreter,
            temp_prefix=settings.temp_prefix,
        )
        result = container.package_service.build(request)
    except ShelfError as exc:
        raise _fail(exc) from exc

    typer.secho(
        f"Wrote {result.entry_count} entries ({result.archive_format}) to {result.destination}",
        fg=typer.colors.GREEN,
        err=True,
    )


if __name__ == "__main__":
    app()
