"""Services for toot-comments.

Remote API access, root resolution with its durable cache, and the
shaping of Mastodon statuses into widget comments.
"""

from .aggregator import CommentAggregator, StatusSource
from .comment_filters import RootFilter, filter_comments, filter_stats
from .comment_models import Author, Comment, Result, Stats
from .mastodon_client import MastodonClient
from .mastodon_models import Account, SearchResult, Status, StatusContext
from .query_normalizer import QueryNormalizer
from .root_cache import RootCache, RootSet

__all__ = [
    "Account",
    "Author",
    "Comment",
    "CommentAggregator",
    "MastodonClient",
    "QueryNormalizer",
    "Result",
    "RootCache",
    "RootFilter",
    "RootSet",
    "SearchResult",
    "Stats",
    "Status",
    "StatusContext",
    "StatusSource",
    "filter_comments",
    "filter_stats",
]
