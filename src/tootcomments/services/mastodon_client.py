"""Mastodon API client.

Thin wrapper over a requests session exposing the three calls the
aggregator needs: status search, single status lookup and the descendants
of a status. Every failure (transport, HTTP status, JSON decoding or schema
mismatch) is raised as a MastodonAPIError.
"""

from __future__ import annotations

import logging
import time
from typing import Any, TypeVar

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter

from tootcomments.shared.constants import APIConfig, MastodonEndpoints
from tootcomments.shared.errors import ErrorCode, MastodonAPIError, create_api_error
from tootcomments.shared.logging import log_api_call

from .mastodon_models import MastodonModel, SearchResult, Status, StatusContext

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=MastodonModel)


class MastodonClient:
    """Authenticated, blocking client for one Mastodon instance.

    The underlying session is shared between threads; each call is bounded
    by the configured timeout.

    Args:
        base_url: Instance URL, e.g. "https://mastodon.social"
        token: Bearer token attached to every request
        timeout: Per-request timeout in seconds
        pool_size: Maximum pooled connections to the instance
        session: Optional pre-built session (tests inject one)
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = APIConfig.DEFAULT_TIMEOUT,
        pool_size: int = APIConfig.DEFAULT_POOL_SIZE,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or self._create_session(pool_size)
        self.session.headers.update(
            {
                APIConfig.AUTH_HEADER: f"{APIConfig.AUTH_SCHEME} {token}",
                "Accept": APIConfig.ACCEPT_JSON,
                "User-Agent": APIConfig.USER_AGENT,
            }
        )

        logger.info("Mastodon client initialized for %s", self.base_url)

    @staticmethod
    def _create_session(pool_size: int) -> requests.Session:
        session = requests.Session()
        # No transport retries: a failed call fails the request it serves.
        adapter = HTTPAdapter(
            pool_connections=pool_size,
            pool_maxsize=pool_size,
            max_retries=0,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint}"

    def _get(self, endpoint: str, params: dict[str, str] | None = None) -> Any:
        """Perform a GET request and return the decoded JSON body.

        Raises:
            MastodonAPIError: On timeout, connection failure, non-2xx status
                or an undecodable body
        """
        url = self._url(endpoint)
        start = time.perf_counter()

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise create_api_error(
                f"Request to {endpoint} timed out after {self.timeout}s",
                endpoint=endpoint,
                code=ErrorCode.API_TIMEOUT,
                original_error=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise create_api_error(
                f"Request to {endpoint} failed: {e}",
                endpoint=endpoint,
                code=ErrorCode.API_CONNECTION_ERROR,
                original_error=e,
            ) from e

        duration_ms = (time.perf_counter() - start) * 1000
        log_api_call(
            logger,
            endpoint=endpoint,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        if not response.ok:
            raise create_api_error(
                f"Request to {endpoint} returned HTTP {response.status_code}",
                endpoint=endpoint,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise create_api_error(
                f"Response from {endpoint} is not valid JSON",
                endpoint=endpoint,
                code=ErrorCode.API_INVALID_RESPONSE,
                status_code=response.status_code,
                original_error=e,
            ) from e

    @staticmethod
    def _decode(model: type[ModelT], payload: Any, endpoint: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise create_api_error(
                f"Response from {endpoint} does not match {model.__name__}",
                endpoint=endpoint,
                code=ErrorCode.API_INVALID_RESPONSE,
                original_error=e,
            ) from e

    def search(self, query: str) -> SearchResult:
        """Search statuses matching query.

        Raises:
            MastodonAPIError: If the request or decoding fails
        """
        endpoint = MastodonEndpoints.SEARCH
        payload = self._get(
            endpoint,
            params={
                APIConfig.SEARCH_PARAM: query,
                APIConfig.SEARCH_TYPE_PARAM: APIConfig.SEARCH_TYPE_STATUSES,
            },
        )
        return self._decode(SearchResult, payload, endpoint)

    def fetch_status(self, status_id: str) -> Status:
        """Fetch a single status with its counters.

        Raises:
            MastodonAPIError: If the request or decoding fails
        """
        endpoint = MastodonEndpoints.STATUS.format(id=status_id)
        return self._decode(Status, self._get(endpoint), endpoint)

    def fetch_descendants(self, status_id: str) -> list[Status]:
        """Fetch every reply below a status, direct or transitive.

        Raises:
            MastodonAPIError: If the request or decoding fails
        """
        endpoint = MastodonEndpoints.STATUS_CONTEXT.format(id=status_id)
        context = self._decode(StatusContext, self._get(endpoint), endpoint)
        return context.descendants

    def close(self) -> None:
        self.session.close()


__all__ = ["MastodonAPIError", "MastodonClient"]
