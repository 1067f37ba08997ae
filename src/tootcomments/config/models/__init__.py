"""Configuration models for toot-comments."""

from __future__ import annotations

from .api_settings import MastodonSettings
from .cache_settings import CacheSettings
from .server_settings import LoggingSettings, ServerSettings
from .settings import Settings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "MastodonSettings",
    "ServerSettings",
    "Settings",
]
