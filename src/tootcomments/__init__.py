"""toot-comments: serve Mastodon replies as comments for static blogs."""

from tootcomments.shared.constants import Application

__version__ = Application.VERSION

__all__ = ["__version__"]
