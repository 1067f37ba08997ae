"""Query normalization for root cache keys."""

from __future__ import annotations

import logging
import posixpath

from tootcomments.shared.constants import ServerDefaults

logger = logging.getLogger(__name__)


class QueryNormalizer:
    """Turns a raw search key into the canonical form used as cache key.

    Two raw keys address the same cache entry iff their normalized forms
    are equal. Normalization strips whitespace, drops the path suffix
    marker (for keys taken from a request path) and cleans the result
    lexically like a file path: repeated slashes collapse, "." and ".."
    segments are resolved, a trailing slash is dropped and an empty key
    becomes ".".
    """

    def __init__(self, path_suffix: str = ServerDefaults.PATH_SUFFIX) -> None:
        self.path_suffix = path_suffix

    def from_request(self, search: str | None, path: str) -> str:
        """Pick the raw key of a request and normalize it.

        The explicit search parameter wins; otherwise the request path is
        used with its suffix marker removed.
        """
        if search:
            return self.normalize_query(search)
        return self.normalize_query(path, from_path=True)

    def normalize_query(self, query: str, *, from_path: bool = False) -> str:
        """Normalize a query.

        Args:
            query: Raw query string
            from_path: Strip the path suffix marker first

        Returns:
            Normalized query string
        """
        normalized = query.strip()

        if from_path and self.path_suffix and normalized.endswith(self.path_suffix):
            normalized = normalized[: -len(self.path_suffix)]

        normalized = self._clean_path(normalized)

        logger.debug("Normalized query: '%s' -> '%s'", query, normalized)
        return normalized

    @staticmethod
    def _clean_path(value: str) -> str:
        if not value:
            return "."
        cleaned = posixpath.normpath(value)
        # normpath keeps a leading "//" (POSIX allows it to be special)
        if cleaned.startswith("//"):
            cleaned = "/" + cleaned.lstrip("/")
        return cleaned


__all__ = ["QueryNormalizer"]
