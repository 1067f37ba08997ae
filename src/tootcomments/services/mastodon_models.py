"""Mastodon API Response Models.

Pydantic models for the parts of Mastodon API responses that the
aggregator reads. Every model ignores unknown fields, so attachments,
emoji, cards and anything the API adds later pass through unchecked.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MastodonModel(BaseModel):
    """Lenient base for Mastodon payloads.

    Numeric ids are accepted and coerced to strings.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class Account(MastodonModel):
    """Author of a status.

    Attributes:
        id: Account id on the instance
        username: Local handle, used when display_name is empty
        display_name: Free-form display name (may be empty)
        url: Profile page URL
        avatar_static: Non-animated avatar URL
    """

    id: str = Field(..., description="Account id")
    username: str = Field("", description="Local handle")
    display_name: str = Field("", description="Display name (may be empty)")
    url: str = Field("", description="Profile URL")
    avatar_static: str = Field("", description="Static avatar URL")

    @property
    def name(self) -> str:
        """Display name, or the username when no display name is set."""
        return self.display_name or self.username


class Status(MastodonModel):
    """A single status (toot)."""

    id: str = Field(..., description="Status id")
    created_at: datetime = Field(..., description="Creation timestamp")
    in_reply_to_id: str | None = Field(None, description="Parent status id")
    uri: str = Field("", description="Canonical ActivityPub URI")
    url: str | None = Field(None, description="HTML page of the status")
    content: str = Field("", description="Rendered HTML body")
    replies_count: int = Field(0, description="Reply counter reported by the server")
    reblogs_count: int = Field(0, description="Boost counter")
    favourites_count: int = Field(0, description="Favourite counter")
    account: Account

    @property
    def is_top_level(self) -> bool:
        return self.in_reply_to_id is None


class StatusContext(MastodonModel):
    """Thread context of a status; only the descendants are used."""

    descendants: list[Status] = Field(default_factory=list)


class SearchResult(MastodonModel):
    """Result of /api/v2/search; accounts and hashtags are ignored."""

    statuses: list[Status] = Field(default_factory=list)


__all__ = ["Account", "MastodonModel", "SearchResult", "Status", "StatusContext"]
