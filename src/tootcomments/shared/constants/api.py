"""
Mastodon API Constants

Endpoint paths and HTTP client defaults.
"""


class MastodonEndpoints:
    """Mastodon REST endpoints (relative to the instance URL)."""

    SEARCH = "api/v2/search"
    STATUS = "api/v1/statuses/{id}"
    STATUS_CONTEXT = "api/v1/statuses/{id}/context"


class APIConfig:
    """HTTP client defaults."""

    DEFAULT_TIMEOUT = 5.0  # seconds
    DEFAULT_POOL_SIZE = 10
    AUTH_HEADER = "Authorization"
    AUTH_SCHEME = "Bearer"
    ACCEPT_JSON = "application/json"
    USER_AGENT = "toot-comments/0.1.0"
    SEARCH_PARAM = "q"
    SEARCH_TYPE_PARAM = "type"
    SEARCH_TYPE_STATUSES = "statuses"


__all__ = ["APIConfig", "MastodonEndpoints"]
