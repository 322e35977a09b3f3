"""Allow ``python -m shelf``."""

from shelf.cli import app

app(prog_name="shelf")
