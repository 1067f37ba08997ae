"""Application metadata and file system constants."""

from __future__ import annotations

from pathlib import Path


class Application:
    """Application metadata constants."""

    NAME = "toot-comments"
    VERSION = "0.1.0"


class FileSystem:
    """File system locations."""

    HOME_DIR = ".tootcomments"
    CONFIG_FILE = "config.toml"
    CACHE_FILE = "roots.json"
    ENV_FILE = ".env"

    DEFAULT_CACHE_PATH = Path.home() / HOME_DIR / CACHE_FILE
    DEFAULT_CONFIG_PATHS = (
        Path("config") / CONFIG_FILE,
        Path(CONFIG_FILE),
        Path.home() / HOME_DIR / CONFIG_FILE,
    )


class EnvVars:
    """Environment variable names."""

    PREFIX = "TOOTCOMMENTS_"
    NESTED_DELIMITER = "__"


__all__ = ["Application", "EnvVars", "FileSystem"]
