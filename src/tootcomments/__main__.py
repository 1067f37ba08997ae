"""Entry point for ``python -m tootcomments``."""

from tootcomments.cli.typer_app import app

if __name__ == "__main__":
    app()
