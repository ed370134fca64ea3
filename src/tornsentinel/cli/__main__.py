"""Allow ``python -m tornsentinel.cli``."""

from tornsentinel.cli.typer_app import app

app()
