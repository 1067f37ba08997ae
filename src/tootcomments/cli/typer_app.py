"""
toot-comments Typer CLI Application

Commands:
- serve: run the HTTP front end
- resolve: print the root ids a query resolves to
- comments: print the assembled comments for a query
- cache-info: print root cache statistics
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import orjson
import typer

from tootcomments.config.loader import load_settings, set_config
from tootcomments.containers import Container
from tootcomments.shared.constants import Application, CLIHelp
from tootcomments.shared.errors import TootCommentsError
from tootcomments.shared.logging import setup_structured_logger

from .error_handler import handle_cli_error


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


app = typer.Typer(
    name=Application.NAME,
    help=CLIHelp.APP,
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=Application.VERSION))
        raise typer.Exit


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help=CLIHelp.CONFIG, exists=True, dir_okay=False),
    ] = None,
    log_level: Annotated[
        Optional[LogLevel],
        typer.Option("--log-level", case_sensitive=False, help=CLIHelp.LOG_LEVEL),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Load settings, configure logging and build the service container."""
    try:
        settings = load_settings(config)
    except (TootCommentsError, FileNotFoundError) as e:
        raise typer.Exit(handle_cli_error(e, "load-settings")) from e

    if log_level is not None:
        settings.logging.level = log_level.value
    set_config(settings)

    setup_structured_logger(
        level=settings.logging.level,
        log_file=settings.logging.file,
        use_rich_console=settings.logging.rich_console,
    )

    container = Container()
    ctx.obj = container


def _close_services(container: Container) -> None:
    """Stop the fetch pool, flush pending cache writes and drop the session."""
    container.aggregator().close()
    container.root_cache().close()
    container.mastodon_client().close()


def _echo_json(data: object) -> None:
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))


@app.command("serve", help=CLIHelp.SERVE)
def serve_command(
    ctx: typer.Context,
    host: Annotated[Optional[str], typer.Option("--host", help=CLIHelp.HOST)] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help=CLIHelp.PORT)] = None,
) -> None:
    container: Container = ctx.obj
    overrides = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port

    server = container.comment_server(**overrides)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        typer.echo("Shutting down", err=True)
    except TootCommentsError as e:
        raise typer.Exit(handle_cli_error(e, "serve")) from e
    finally:
        server.stop()
        _close_services(container)


@app.command("resolve", help=CLIHelp.RESOLVE)
def resolve_command(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Search key, e.g. a blog post path.")],
) -> None:
    container: Container = ctx.obj
    try:
        roots = container.aggregator().resolve(query)
    except TootCommentsError as e:
        raise typer.Exit(handle_cli_error(e, "resolve")) from e
    finally:
        _close_services(container)
    _echo_json(roots)


@app.command("comments", help=CLIHelp.COMMENTS)
def comments_command(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Search key, e.g. a blog post path.")],
) -> None:
    container: Container = ctx.obj
    try:
        result = container.aggregator().get_result(query)
    except TootCommentsError as e:
        raise typer.Exit(handle_cli_error(e, "comments")) from e
    finally:
        _close_services(container)
    _echo_json(result.model_dump(mode="json"))


@app.command("cache-info", help=CLIHelp.CACHE_INFO)
def cache_info_command(ctx: typer.Context) -> None:
    container: Container = ctx.obj
    _echo_json(container.root_cache().stats())


if __name__ == "__main__":
    app()
