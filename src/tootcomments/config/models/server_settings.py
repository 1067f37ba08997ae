"""HTTP front end and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tootcomments.shared.constants import CLIDefaults, ServerDefaults


class ServerSettings(BaseModel):
    """HTTP front end configuration.

    The max-age values are the cache lifetime hints advertised for
    responses with and without a root.
    """

    host: str = Field(default=ServerDefaults.HOST, description="Bind address")
    port: int = Field(default=ServerDefaults.PORT, ge=0, le=65535, description="Bind port")
    found_max_age: int = Field(
        default=ServerDefaults.FOUND_MAX_AGE,
        ge=0,
        description="Cache-Control max-age when a root was found",
    )
    empty_max_age: int = Field(
        default=ServerDefaults.EMPTY_MAX_AGE,
        ge=0,
        description="Cache-Control max-age when no root was found",
    )
    fetch_workers: int = Field(
        default=ServerDefaults.FETCH_WORKERS,
        gt=0,
        description="Threads used to fetch status and descendants concurrently",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default=CLIDefaults.LOG_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON log file")
    rich_console: bool = Field(
        default=True,
        description="Use rich console output instead of JSON lines",
    )


__all__ = ["LoggingSettings", "ServerSettings"]
