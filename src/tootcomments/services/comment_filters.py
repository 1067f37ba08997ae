"""Shaping of Mastodon statuses into widget comments and stats."""

from __future__ import annotations

from collections.abc import Iterable

from .comment_models import Author, Comment, Stats
from .mastodon_models import SearchResult, Status


class RootFilter:
    """Decides which search hits may anchor a comment thread.

    A status qualifies iff it is top-level (not a reply) and, when an owner
    account id is configured, was written by that account. The order of
    the search results is kept.
    """

    def __init__(self, owner_id: str | None = None) -> None:
        self.owner_id = owner_id or None

    def accepts(self, status: Status) -> bool:
        if not status.is_top_level:
            return False
        return self.owner_id is None or status.account.id == self.owner_id

    def select(self, result: SearchResult) -> list[str]:
        """Return the ids of the qualifying statuses, in result order."""
        return [status.id for status in result.statuses if self.accepts(status)]


def filter_author(status: Status) -> Author:
    account = status.account
    return Author(
        display_name=account.name,
        avatar=account.avatar_static,
        url=account.url,
    )


def filter_comments(statuses: Iterable[Status], root: str) -> dict[str, Comment]:
    """Map descendant statuses to comments keyed by status id."""
    return {
        status.id: Comment(
            author=filter_author(status),
            toot=status.content,
            date=status.created_at,
            url=status.uri,
            reply_to=status.in_reply_to_id,
            root=root,
        )
        for status in statuses
    }


def filter_stats(status: Status) -> Stats:
    """Counters of a root status as reported by the server."""
    return Stats(
        reblogs=status.reblogs_count,
        favs=status.favourites_count,
        replies=status.replies_count,
        url=status.url or "",
    )


__all__ = ["RootFilter", "filter_author", "filter_comments", "filter_stats"]
