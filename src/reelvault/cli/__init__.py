"""Command-line interface."""

from reelvault.cli.typer_app import app

__all__ = ["app"]
