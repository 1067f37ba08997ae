"""HTTP front end constants."""


class HTTPStatusCodes:
    """HTTP status codes used by the front end."""

    OK = 200
    INTERNAL_SERVER_ERROR = 500


class HTTPHeaders:
    """Response header names and values."""

    CACHE_CONTROL = "Cache-Control"
    CONTENT_TYPE = "Content-Type"
    CONTENT_LENGTH = "Content-Length"
    CONTENT_TYPE_JSON = "application/json"
    MAX_AGE = "max-age={seconds}"


class ServerDefaults:
    """Front end defaults."""

    HOST = "127.0.0.1"
    PORT = 8080
    SEARCH_PARAM = "search"
    PATH_SUFFIX = "comments.json"
    HEALTH_PATH = "/health"

    # Cache-Control lifetimes, in seconds
    FOUND_MAX_AGE = 600
    EMPTY_MAX_AGE = 60

    FETCH_WORKERS = 4


__all__ = ["HTTPHeaders", "HTTPStatusCodes", "ServerDefaults"]
