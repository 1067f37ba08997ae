"""Comment aggregation: resolve a query, fetch its thread, shape the result.

The aggregator holds no per-request state. It resolves a query to its
root ids through the root cache (searching Mastodon on a miss), then
fetches the first root's status and descendants concurrently and shapes
them into a Result.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from tootcomments.shared.constants import ServerDefaults
from tootcomments.shared.errors import (
    ErrorCode,
    MastodonAPIError,
    create_fetch_error,
    create_resolution_error,
)
from tootcomments.shared.logging import log_operation_start, log_operation_success

from .comment_filters import RootFilter, filter_comments, filter_stats
from .comment_models import Result
from .mastodon_models import SearchResult, Status
from .query_normalizer import QueryNormalizer
from .root_cache import RootCache, RootSet

logger = logging.getLogger(__name__)


class StatusSource(Protocol):
    """The remote calls the aggregator depends on."""

    def search(self, query: str) -> SearchResult: ...

    def fetch_status(self, status_id: str) -> Status: ...

    def fetch_descendants(self, status_id: str) -> list[Status]: ...


class CommentAggregator:
    """Resolves queries to roots and assembles their comment threads.

    Safe to share between request threads: the only shared mutable state
    is the root cache, which does its own locking.

    Args:
        client: Source of search results, statuses and descendants
        cache: Query to RootSet cache
        root_filter: Policy selecting roots among search hits
        normalizer: Query normalizer (a default one if omitted)
        fetch_workers: Threads used to fetch status and descendants
    """

    def __init__(
        self,
        client: StatusSource,
        cache: RootCache,
        root_filter: RootFilter | None = None,
        normalizer: QueryNormalizer | None = None,
        fetch_workers: int = ServerDefaults.FETCH_WORKERS,
    ) -> None:
        self.client = client
        self.cache = cache
        self.root_filter = root_filter or RootFilter()
        self.normalizer = normalizer or QueryNormalizer()
        self._executor = ThreadPoolExecutor(
            max_workers=fetch_workers,
            thread_name_prefix="CommentFetch",
        )

    def resolve(self, query: str) -> RootSet:
        """Map a query to the ids of its root statuses.

        A cached entry, even an empty one, is returned without contacting
        the server. On a miss the search results are filtered and cached.

        Raises:
            ResolutionError: If the remote search fails; nothing is cached
        """
        query = self.normalizer.normalize_query(query)

        roots, found = self.cache.get(query)
        if found:
            return roots

        logger.info("Searching roots for %s", query)
        try:
            search_result = self.client.search(query)
        except MastodonAPIError as e:
            raise create_resolution_error(query, original_error=e) from e

        roots = self.root_filter.select(search_result)
        self.cache.put(query, roots)
        return roots

    def get_result(self, query: str) -> Result:
        """Assemble the comments and stats for a query.

        Only the first root is used. A query without roots yields an empty
        Result, which is not an error.

        Raises:
            ResolutionError: If the roots could not be determined
            FetchError: If the status or its descendants could not be fetched
        """
        query = self.normalizer.normalize_query(query)
        roots = self.resolve(query)

        if not roots:
            logger.info("No roots found for %s", query)
            return Result()

        root = roots[0]
        start = time.perf_counter()
        log_operation_start(logger, "get_result", {"query": query, "root": root})

        descendants_future = self._executor.submit(self.client.fetch_descendants, root)
        status_future = self._executor.submit(self.client.fetch_status, root)

        try:
            descendants = descendants_future.result()
        except MastodonAPIError as e:
            status_future.cancel()
            raise create_fetch_error(
                root,
                ErrorCode.COMMENT_FETCH_FAILED,
                f"Could not query comments of {root}",
                query=query,
                original_error=e,
            ) from e

        try:
            status = status_future.result()
        except MastodonAPIError as e:
            raise create_fetch_error(
                root,
                ErrorCode.STATUS_FETCH_FAILED,
                f"Could not get statistics of {root}",
                query=query,
                original_error=e,
            ) from e

        comments = filter_comments(descendants, root)
        stats = filter_stats(status)
        stats.replies = len(comments)
        stats.root = root

        log_operation_success(
            logger,
            operation="get_result",
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            result_info={"comments": len(comments)},
            context={"query": query, "root": root},
        )
        return Result(comments=comments, stats=stats)

    def close(self) -> None:
        self._executor.shutdown(wait=True)


__all__ = ["CommentAggregator", "StatusSource"]
