"""Tests for root selection and comment shaping."""

from __future__ import annotations

from datetime import datetime, timezone

from tests.helpers import OWNER_ID, make_search_result, make_status
from tootcomments.services.comment_filters import (
    RootFilter,
    filter_author,
    filter_comments,
    filter_stats,
)


class TestRootFilter:
    """Which search hits may become roots."""

    def test_owner_filter_keeps_top_level_owner_posts(self):
        result = make_search_result(
            make_status("1"),
            make_status("2", in_reply_to_id="1"),
            make_status("3", account_id="999"),
        )

        assert RootFilter(owner_id=OWNER_ID).select(result) == ["1"]

    def test_without_owner_any_top_level_status_qualifies(self):
        result = make_search_result(
            make_status("5", account_id="999"),
            make_status("6", in_reply_to_id="5"),
            make_status("7"),
        )

        assert RootFilter().select(result) == ["5", "7"]

    def test_empty_owner_means_any_account(self):
        assert RootFilter(owner_id="").owner_id is None

    def test_keeps_search_order(self):
        result = make_search_result(make_status("9"), make_status("3"), make_status("5"))

        assert RootFilter(owner_id=OWNER_ID).select(result) == ["9", "3", "5"]

    def test_no_hits(self):
        assert RootFilter().select(make_search_result()) == []


class TestFilterAuthor:
    def test_uses_display_name(self):
        author = filter_author(make_status("1", display_name="Alice A."))

        assert author.display_name == "Alice A."
        assert author.avatar == "https://example.social/avatars/alice.png"
        assert author.url == "https://example.social/@alice"

    def test_falls_back_to_username(self):
        """An empty display name is replaced by the handle."""
        author = filter_author(make_status("1", display_name=""))

        assert author.display_name == "alice"


class TestFilterComments:
    def test_maps_descendants_by_id(self):
        statuses = [
            make_status("2", in_reply_to_id="1", username="bob"),
            make_status("3", in_reply_to_id="2", username="carol"),
        ]

        comments = filter_comments(statuses, "1")

        assert list(comments) == ["2", "3"]
        reply = comments["3"]
        assert reply.reply_to == "2"
        assert reply.root == "1"
        assert reply.toot == "<p>status 3</p>"
        assert reply.url == "https://example.social/users/carol/statuses/3"
        assert reply.date == datetime(2018, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_no_descendants(self):
        assert filter_comments([], "1") == {}


class TestFilterStats:
    def test_copies_counters(self):
        stats = filter_stats(
            make_status("1", replies_count=4, reblogs_count=2, favourites_count=9),
        )

        assert stats.replies == 4
        assert stats.reblogs == 2
        assert stats.favs == 9
        assert stats.url == "https://example.social/@alice/1"
        assert stats.root == ""

    def test_missing_url_becomes_empty(self):
        assert filter_stats(make_status("1", url=None)).url == ""
