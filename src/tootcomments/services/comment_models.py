"""Comment widget response models.

These models define the JSON document served to embedding pages: a map of
comments keyed by status id plus one stats record for the root.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Author(BaseModel):
    """Author of a comment as shown by the widget."""

    display_name: str = Field(..., description="Display name, or handle when empty")
    avatar: str = Field("", description="Avatar URL")
    url: str = Field("", description="Profile URL")


class Comment(BaseModel):
    """One reply below the root.

    Attributes:
        author: Who wrote it
        toot: Rendered HTML body
        date: Creation time, serialized as ISO-8601
        url: Canonical URI of the status
        reply_to: Id of the status this one answers
        root: Id of the root the thread hangs off
    """

    model_config = ConfigDict(frozen=True)

    author: Author
    toot: str = ""
    date: datetime
    url: str = ""
    reply_to: str | None = None
    root: str = ""


class Stats(BaseModel):
    """Counters of the root status.

    replies is the number of comments actually returned, not the counter
    reported by the server.
    """

    reblogs: int = 0
    favs: int = 0
    replies: int = 0
    url: str = ""
    root: str = ""


class Result(BaseModel):
    """Everything returned for one query."""

    comments: dict[str, Comment] = Field(default_factory=dict)
    stats: Stats = Field(default_factory=Stats)

    @property
    def has_root(self) -> bool:
        """Whether a root was found for the query."""
        return bool(self.stats.root)

    def cache_max_age(self, found_max_age: int, empty_max_age: int) -> int:
        """Cache lifetime hint for this result, in seconds."""
        return found_max_age if self.has_root else empty_max_age

    def to_json(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


__all__ = ["Author", "Comment", "Result", "Stats"]
