"""Entry point for ``python -m logocrop``."""

from logocrop.cli.main import app

app()
