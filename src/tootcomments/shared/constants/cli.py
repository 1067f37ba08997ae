"""CLI constants."""


class CLIDefaults:
    """CLI defaults and exit codes."""

    EXIT_ERROR = 1
    LOG_LEVEL = "INFO"


class CLIHelp:
    """Help texts for CLI commands and options."""

    APP = "Serve Mastodon replies as blog comments."
    SERVE = "Run the HTTP front end."
    RESOLVE = "Resolve a query to its root status ids."
    COMMENTS = "Print the assembled comments for a query."
    CACHE_INFO = "Show root cache statistics."
    CONFIG = "Path to a TOML configuration file."
    LOG_LEVEL = "Logging level (DEBUG, INFO, WARNING, ERROR)."
    HOST = "Address to bind to."
    PORT = "Port to listen on."
    VERSION_TEXT = "toot-comments {version}"


__all__ = ["CLIDefaults", "CLIHelp"]
