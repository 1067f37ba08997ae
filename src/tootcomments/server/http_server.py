"""
HTTP front end serving comment threads to embedding pages.

Each request is handled on its own thread. The query is taken from the
`search` parameter, or else from the request path with the trailing
`comments.json` removed, so both of these resolve the same key:

    GET /blog/2018/hello/comments.json
    GET /?search=/blog/2018/hello
"""

from __future__ import annotations

import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs, unquote, urlparse

from tootcomments.services.aggregator import CommentAggregator
from tootcomments.services.comment_models import Result
from tootcomments.services.query_normalizer import QueryNormalizer
from tootcomments.shared.constants import (
    HTTPHeaders,
    HTTPStatusCodes,
    ServerDefaults,
)
from tootcomments.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    TootCommentsError,
)
from tootcomments.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


class CommentRequestHandler(BaseHTTPRequestHandler):
    """Request handler for comment lookups."""

    server: CommentHTTPServer

    def do_GET(self) -> None:
        parsed = urlparse(self.path)

        if parsed.path == ServerDefaults.HEALTH_PATH:
            self._send_json(HTTPStatusCodes.OK, b'{"status": "healthy"}')
            return

        search = parse_qs(parsed.query).get(ServerDefaults.SEARCH_PARAM, [""])[0]
        query = self.server.normalizer.from_request(search, unquote(parsed.path))
        self._handle_comments(query)

    def _handle_comments(self, query: str) -> None:
        try:
            result = self.server.aggregator.get_result(query)
        except TootCommentsError as e:
            log_operation_error(logger, e, operation="serve_comments")
            self._send_error_status()
            return
        except Exception as e:  # noqa: BLE001
            error = TootCommentsError(
                ErrorCode.SERVER_UNEXPECTED_ERROR,
                f"Unexpected error while serving comments: {e}",
                ErrorContext(operation="serve_comments", query=query),
                e,
            )
            log_operation_error(logger, error)
            self._send_error_status()
            return

        try:
            body = result.to_json()
        except (TypeError, ValueError) as e:
            error = TootCommentsError(
                ErrorCode.RESPONSE_SERIALIZATION_FAILED,
                "Could not serialize result",
                ErrorContext(operation="serve_comments", query=query),
                e,
            )
            log_operation_error(logger, error)
            self._send_error_status()
            return

        max_age = self.server.max_age_for(result)
        self._send_json(HTTPStatusCodes.OK, body, max_age=max_age)

    def _send_json(self, status: int, body: bytes, max_age: int | None = None) -> None:
        self.send_response(status)
        if max_age is not None:
            self.send_header(
                HTTPHeaders.CACHE_CONTROL,
                HTTPHeaders.MAX_AGE.format(seconds=max_age),
            )
        self.send_header(HTTPHeaders.CONTENT_TYPE, HTTPHeaders.CONTENT_TYPE_JSON)
        self.send_header(HTTPHeaders.CONTENT_LENGTH, str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_error_status(self) -> None:
        self.send_response(HTTPStatusCodes.INTERNAL_SERVER_ERROR)
        self.send_header(HTTPHeaders.CONTENT_LENGTH, "0")
        self.end_headers()

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


class CommentHTTPServer(ThreadingHTTPServer):
    """Threaded HTTP server bound to one aggregator."""

    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        aggregator: CommentAggregator,
        normalizer: QueryNormalizer | None = None,
        found_max_age: int = ServerDefaults.FOUND_MAX_AGE,
        empty_max_age: int = ServerDefaults.EMPTY_MAX_AGE,
    ) -> None:
        super().__init__(address, CommentRequestHandler)
        self.aggregator = aggregator
        self.normalizer = normalizer or aggregator.normalizer
        self.found_max_age = found_max_age
        self.empty_max_age = empty_max_age

    def max_age_for(self, result: Result) -> int:
        return result.cache_max_age(self.found_max_age, self.empty_max_age)


class CommentServer:
    """
    Runs a CommentHTTPServer either in the foreground or on a thread.

    Args:
        aggregator: Aggregator answering the requests
        host: Host to bind to
        port: Port to bind to (0 picks a free port)
        found_max_age: Cache-Control max-age when a root was found
        empty_max_age: Cache-Control max-age when none was found
    """

    def __init__(
        self,
        aggregator: CommentAggregator,
        host: str = ServerDefaults.HOST,
        port: int = ServerDefaults.PORT,
        found_max_age: int = ServerDefaults.FOUND_MAX_AGE,
        empty_max_age: int = ServerDefaults.EMPTY_MAX_AGE,
    ) -> None:
        self.aggregator = aggregator
        self.host = host
        self.port = port
        self.found_max_age = found_max_age
        self.empty_max_age = empty_max_age
        self.httpd: CommentHTTPServer | None = None
        self.server_thread: threading.Thread | None = None

    def _bind(self) -> CommentHTTPServer:
        if self.httpd is None:
            try:
                self.httpd = CommentHTTPServer(
                    (self.host, self.port),
                    self.aggregator,
                    found_max_age=self.found_max_age,
                    empty_max_age=self.empty_max_age,
                )
            except OSError as e:
                raise ApplicationError(
                    ErrorCode.SERVER_START_FAILED,
                    f"Could not listen on {self.host}:{self.port}: {e}",
                    ErrorContext(
                        operation="start_server",
                        additional_data={"host": self.host, "port": self.port},
                    ),
                    e,
                ) from e
            self.port = self.httpd.server_address[1]
            logger.info("Serving comments on http://%s:%d", self.host, self.port)
        return self.httpd

    def serve_forever(self) -> None:
        """Serve in the calling thread until shutdown() or an interrupt."""
        self._bind().serve_forever()

    def start(self) -> None:
        """Serve on a background daemon thread."""
        httpd = self._bind()
        self.server_thread = threading.Thread(
            target=httpd.serve_forever,
            daemon=True,
            name="CommentServer",
        )
        self.server_thread.start()

    def stop(self) -> None:
        if self.httpd is None:
            return
        if self.server_thread is not None:
            self.httpd.shutdown()
            self.server_thread.join()
            self.server_thread = None
        self.httpd.server_close()
        self.httpd = None
        logger.info("Comment server stopped")

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


__all__ = ["CommentHTTPServer", "CommentRequestHandler", "CommentServer"]
