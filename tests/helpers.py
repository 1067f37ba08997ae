"""Builders for Mastodon payloads used across the test suite."""

from __future__ import annotations

from typing import Any

from tootcomments.services.mastodon_models import SearchResult, Status

OWNER_ID = "42"


def make_status_payload(
    status_id: str,
    *,
    in_reply_to_id: str | None = None,
    account_id: str = OWNER_ID,
    username: str = "alice",
    display_name: str = "Alice",
    **overrides: Any,
) -> dict[str, Any]:
    """Build a Mastodon status payload as the API returns it."""
    payload: dict[str, Any] = {
        "id": status_id,
        "created_at": "2018-05-01T12:00:00.000Z",
        "in_reply_to_id": in_reply_to_id,
        "uri": f"https://example.social/users/{username}/statuses/{status_id}",
        "url": f"https://example.social/@{username}/{status_id}",
        "content": f"<p>status {status_id}</p>",
        "replies_count": 0,
        "reblogs_count": 0,
        "favourites_count": 0,
        "account": {
            "id": account_id,
            "username": username,
            "display_name": display_name,
            "url": f"https://example.social/@{username}",
            "avatar_static": f"https://example.social/avatars/{username}.png",
        },
    }
    payload.update(overrides)
    return payload


def make_status(status_id: str, **kwargs: Any) -> Status:
    return Status.model_validate(make_status_payload(status_id, **kwargs))


def make_search_result(*statuses: Status) -> SearchResult:
    return SearchResult(statuses=list(statuses))
