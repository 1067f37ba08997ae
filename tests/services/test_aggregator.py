"""Tests for CommentAggregator."""

from __future__ import annotations

import threading

import orjson
import pytest

from tests.helpers import OWNER_ID, make_search_result, make_status
from tootcomments.services.aggregator import CommentAggregator
from tootcomments.services.comment_filters import RootFilter
from tootcomments.services.comment_models import Result
from tootcomments.services.root_cache import RootCache
from tootcomments.shared.errors import (
    ErrorCode,
    FetchError,
    ResolutionError,
    create_api_error,
)


@pytest.fixture
def cache():
    return RootCache(None)


@pytest.fixture
def aggregator(mock_client, cache):
    agg = CommentAggregator(mock_client, cache, RootFilter(owner_id=OWNER_ID))
    yield agg
    agg.close()


def api_failure(endpoint: str = "api/v2/search"):
    return create_api_error("boom", endpoint=endpoint, status_code=503)


class TestResolve:
    """Query to RootSet resolution."""

    def test_miss_searches_and_caches(self, aggregator, mock_client, cache):
        roots = aggregator.resolve("/blog/2018/hello")

        assert roots == ["1"]
        mock_client.search.assert_called_once_with("/blog/2018/hello")
        assert cache.get("/blog/2018/hello") == (["1"], True)

    def test_second_resolve_uses_cache(self, aggregator, mock_client):
        first = aggregator.resolve("/blog/2018/hello")
        second = aggregator.resolve("/blog/2018/hello")

        assert first == second
        assert mock_client.search.call_count == 1

    def test_query_is_normalized_before_lookup(self, aggregator, mock_client):
        aggregator.resolve("  /blog//2018/hello/ ")
        aggregator.resolve("/blog/2018/./hello")

        mock_client.search.assert_called_once_with("/blog/2018/hello")

    def test_empty_result_is_cached(self, aggregator, mock_client, cache):
        """A query with no matching roots is not searched again."""
        mock_client.search.return_value = make_search_result()

        assert aggregator.resolve("/blog/nothing") == []
        assert aggregator.resolve("/blog/nothing") == []

        assert mock_client.search.call_count == 1
        assert cache.get("/blog/nothing") == ([], True)

    def test_filters_replies_and_foreign_accounts(self, aggregator, mock_client):
        mock_client.search.return_value = make_search_result(
            make_status("1"),
            make_status("2", in_reply_to_id="1"),
            make_status("3", account_id="999", username="mallory"),
            make_status("4"),
        )

        assert aggregator.resolve("/blog/mixed") == ["1", "4"]

    def test_owner_filter_three_candidates(self, mock_client, cache):
        mock_client.search.return_value = make_search_result(
            make_status("1", account_id="A"),
            make_status("2", in_reply_to_id="1", account_id="A"),
            make_status("3", account_id="B"),
        )
        aggregator = CommentAggregator(mock_client, cache, RootFilter(owner_id="A"))

        try:
            assert aggregator.resolve("/blog/owner") == ["1"]
        finally:
            aggregator.close()

    def test_search_failure_raises_and_caches_nothing(self, aggregator, mock_client, cache):
        mock_client.search.side_effect = api_failure()

        with pytest.raises(ResolutionError) as exc_info:
            aggregator.resolve("/blog/down")

        assert exc_info.value.code == ErrorCode.ROOT_RESOLUTION_FAILED
        assert "/blog/down" not in cache


class TestGetResult:
    """Assembly of comments and stats."""

    def test_assembles_comments_and_stats(self, aggregator, mock_client):
        result = aggregator.get_result("/blog/2018/hello")

        assert set(result.comments) == {"2", "3"}
        assert result.comments["3"].reply_to == "2"
        assert all(comment.root == "1" for comment in result.comments.values())
        assert result.stats.root == "1"
        assert result.stats.reblogs == 2
        assert result.stats.favs == 7
        assert result.stats.url == "https://example.social/@alice/1"
        mock_client.fetch_status.assert_called_once_with("1")
        mock_client.fetch_descendants.assert_called_once_with("1")

    def test_replies_counts_returned_comments(self, aggregator):
        """The server reports 5 replies but only 2 descendants are returned."""
        result = aggregator.get_result("/blog/2018/hello")

        assert result.stats.replies == len(result.comments) == 2

    def test_reply_count_override_with_three_descendants(self, aggregator, mock_client):
        mock_client.fetch_descendants.return_value = [
            make_status("2", in_reply_to_id="1"),
            make_status("3", in_reply_to_id="1"),
            make_status("4", in_reply_to_id="2"),
        ]

        result = aggregator.get_result("/blog/2018/hello")

        assert mock_client.fetch_status.return_value.replies_count == 5
        assert result.stats.replies == 3

    def test_uses_first_root_only(self, aggregator, mock_client):
        mock_client.search.return_value = make_search_result(
            make_status("10"),
            make_status("11"),
        )

        result = aggregator.get_result("/blog/two-roots")

        assert result.stats.root == "10"
        mock_client.fetch_descendants.assert_called_once_with("10")

    def test_no_roots_yields_empty_result(self, aggregator, mock_client):
        mock_client.search.return_value = make_search_result()

        result = aggregator.get_result("/blog/nothing")

        assert result == Result()
        assert not result.has_root
        mock_client.fetch_status.assert_not_called()
        mock_client.fetch_descendants.assert_not_called()

    def test_descendants_failure_raises_fetch_error(self, aggregator, mock_client):
        mock_client.fetch_descendants.side_effect = api_failure("api/v1/statuses/1/context")

        with pytest.raises(FetchError) as exc_info:
            aggregator.get_result("/blog/2018/hello")

        assert exc_info.value.code == ErrorCode.COMMENT_FETCH_FAILED

    def test_status_failure_raises_fetch_error(self, aggregator, mock_client):
        mock_client.fetch_status.side_effect = api_failure("api/v1/statuses/1")

        with pytest.raises(FetchError) as exc_info:
            aggregator.get_result("/blog/2018/hello")

        assert exc_info.value.code == ErrorCode.STATUS_FETCH_FAILED

    def test_fetch_failure_keeps_resolved_roots(self, aggregator, mock_client, cache):
        mock_client.fetch_status.side_effect = api_failure("api/v1/statuses/1")

        with pytest.raises(FetchError):
            aggregator.get_result("/blog/2018/hello")

        assert cache.get("/blog/2018/hello") == (["1"], True)

    def test_result_serializes_to_widget_json(self, aggregator):
        body = orjson.loads(aggregator.get_result("/blog/2018/hello").to_json())

        assert set(body) == {"comments", "stats"}
        comment = body["comments"]["2"]
        assert comment["author"] == {
            "display_name": "Bob",
            "avatar": "https://example.social/avatars/bob.png",
            "url": "https://example.social/@bob",
        }
        assert comment["url"] == "https://example.social/users/bob/statuses/2"
        assert comment["date"].startswith("2018-05-01T12:00:00")
        assert body["stats"]["replies"] == 2


class TestConcurrentResolution:
    """Several threads missing on the same query at once."""

    def test_concurrent_misses_converge(self, mock_client, cache_path):
        cache = RootCache(cache_path)
        aggregator = CommentAggregator(mock_client, cache)
        barrier = threading.Barrier(8)
        results: list[list[str]] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            roots = aggregator.resolve("/blog/2018/hello")
            with lock:
                results.append(roots)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        aggregator.close()
        cache.flush()

        assert results == [["1"]] * 8
        assert 1 <= mock_client.search.call_count <= 8
        assert RootCache(cache_path).get("/blog/2018/hello") == (["1"], True)
