"""Command line interface for toot-comments."""

from .typer_app import app

__all__ = ["app"]
