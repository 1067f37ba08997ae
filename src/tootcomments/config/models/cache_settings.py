"""Root cache configuration model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from tootcomments.shared.constants import FileSystem


class CacheSettings(BaseModel):
    """Root cache configuration."""

    path: Path = Field(
        default=FileSystem.DEFAULT_CACHE_PATH,
        description="JSON file mirroring the query to roots mapping",
    )
    persistence_enabled: bool = Field(
        default=True,
        description="Mirror the cache to disk (False keeps it in memory only)",
    )


__all__ = ["CacheSettings"]
