"""Dependency Injection container for toot-comments.

The container manages:
- Settings (Singleton, from the global loader)
- Mastodon client (Singleton, one pooled session per process)
- Root cache (Singleton, loaded once at startup)
- Comment aggregator (Singleton)
- Comment server (Factory)
"""

from __future__ import annotations

from dependency_injector import containers, providers

from tootcomments.config.loader import get_config
from tootcomments.server.http_server import CommentServer
from tootcomments.services import (
    CommentAggregator,
    MastodonClient,
    QueryNormalizer,
    RootCache,
    RootFilter,
)


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for toot-comments services.

    Example:
        >>> container = Container()
        >>> aggregator = container.aggregator()
        >>> result = aggregator.get_result("/blog/2018/hello")
    """

    config = providers.Singleton(get_config)

    mastodon_client = providers.Singleton(
        MastodonClient,
        base_url=providers.Callable(lambda config: config.mastodon.url, config=config),
        token=providers.Callable(lambda config: config.mastodon.token, config=config),
        timeout=providers.Callable(lambda config: config.mastodon.timeout, config=config),
        pool_size=providers.Callable(lambda config: config.mastodon.pool_size, config=config),
    )

    root_cache = providers.Singleton(
        RootCache,
        path=providers.Callable(lambda config: config.cache.path, config=config),
        persistence_enabled=providers.Callable(
            lambda config: config.cache.persistence_enabled,
            config=config,
        ),
    )

    root_filter = providers.Factory(
        RootFilter,
        owner_id=providers.Callable(lambda config: config.mastodon.userid, config=config),
    )

    query_normalizer = providers.Singleton(QueryNormalizer)

    aggregator = providers.Singleton(
        CommentAggregator,
        client=mastodon_client,
        cache=root_cache,
        root_filter=root_filter,
        normalizer=query_normalizer,
        fetch_workers=providers.Callable(
            lambda config: config.server.fetch_workers,
            config=config,
        ),
    )

    comment_server = providers.Factory(
        CommentServer,
        aggregator=aggregator,
        host=providers.Callable(lambda config: config.server.host, config=config),
        port=providers.Callable(lambda config: config.server.port, config=config),
        found_max_age=providers.Callable(
            lambda config: config.server.found_max_age,
            config=config,
        ),
        empty_max_age=providers.Callable(
            lambda config: config.server.empty_max_age,
            config=config,
        ),
    )


__all__ = ["Container"]
