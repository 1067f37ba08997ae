"""HTTP front end."""

from .http_server import CommentHTTPServer, CommentRequestHandler, CommentServer

__all__ = ["CommentHTTPServer", "CommentRequestHandler", "CommentServer"]
