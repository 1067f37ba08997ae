"""toot-comments Configuration Module

Settings models and the loader functions that build them from TOML files,
.env files and TOOTCOMMENTS_* environment variables.
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config, set_config
from .models import (
    CacheSettings,
    LoggingSettings,
    MastodonSettings,
    ServerSettings,
    Settings,
)

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "MastodonSettings",
    "ServerSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
    "set_config",
]
