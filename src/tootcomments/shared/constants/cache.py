"""Root cache constants."""


class Cache:
    """Root cache file format constants."""

    ROOTS_KEY = "roots"
    TMP_PREFIX = "."
    TMP_SUFFIX = ".tmp"

    # Seconds close() waits for outstanding background writes
    FLUSH_TIMEOUT = 5.0


__all__ = ["Cache"]
