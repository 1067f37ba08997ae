"""
Pytest configuration and shared fixtures for toot-comments tests.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from tests.helpers import make_search_result, make_status


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def cache_path(temp_dir: Path) -> Path:
    return temp_dir / "roots.json"


@pytest.fixture
def mock_client(mocker):
    """Mock Mastodon client with one root (id "1") and two replies."""
    client = mocker.Mock()
    client.search.return_value = make_search_result(make_status("1"))
    client.fetch_status.return_value = make_status(
        "1",
        replies_count=5,
        reblogs_count=2,
        favourites_count=7,
    )
    client.fetch_descendants.return_value = [
        make_status(
            "2", in_reply_to_id="1", account_id="7", username="bob", display_name="Bob"
        ),
        make_status("3", in_reply_to_id="2", account_id="8", username="carol"),
    ]
    return client


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo handler setup done by the CLI so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("tootcomments")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
