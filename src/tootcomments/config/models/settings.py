"""toot-comments Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tootcomments.config.models.api_settings import MastodonSettings
from tootcomments.config.models.cache_settings import CacheSettings
from tootcomments.config.models.server_settings import (
    LoggingSettings,
    ServerSettings,
)
from tootcomments.shared.constants import EnvVars


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Keyword arguments (e.g. a parsed TOML file) win over TOOTCOMMENTS_*
    environment variables such as TOOTCOMMENTS_MASTODON__TOKEN, which win
    over the defaults. Nested sections are merged key by key, so a token
    can live in the environment while the rest sits in the TOML file.
    """

    model_config = SettingsConfigDict(
        env_prefix=EnvVars.PREFIX,
        env_nested_delimiter=EnvVars.NESTED_DELIMITER,
        env_ignore_empty=True,
        extra="ignore",
    )

    mastodon: MastodonSettings = Field(default_factory=MastodonSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from TOML file with environment variable overrides."""

        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file (the token included)."""

        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
