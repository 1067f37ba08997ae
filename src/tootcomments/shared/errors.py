"""toot-comments Error Handling Module

This module defines the error handling system for toot-comments, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("token",)


class ErrorCode(str, Enum):
    """Error codes for toot-comments.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Remote API Errors
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_CONNECTION_ERROR = "API_CONNECTION_ERROR"
    API_INVALID_RESPONSE = "API_INVALID_RESPONSE"

    # Aggregation Errors
    ROOT_RESOLUTION_FAILED = "ROOT_RESOLUTION_FAILED"
    COMMENT_FETCH_FAILED = "COMMENT_FETCH_FAILED"
    STATUS_FETCH_FAILED = "STATUS_FETCH_FAILED"

    # Cache Errors
    CACHE_LOAD_FAILED = "CACHE_LOAD_FAILED"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Configuration Errors
    CONFIG_INVALID = "CONFIG_INVALID"

    # Server Errors
    SERVER_START_FAILED = "SERVER_START_FAILED"
    RESPONSE_SERIALIZATION_FAILED = "RESPONSE_SERIALIZATION_FAILED"
    SERVER_UNEXPECTED_ERROR = "SERVER_UNEXPECTED_ERROR"

    # CLI Errors
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path and Enum to primitive types.

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types are allowed in additional_data so the context can
    always be serialized into a structured log record.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        query: Optional normalized query the error relates to
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    query: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict, dropping masked keys.

        additional_data is always present in the output (empty when unset).
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation
        if self.query is not None:
            data["query"] = self.query

        extra = self.additional_data or {}
        data["additional_data"] = {k: v for k, v in extra.items() if k not in mask_keys}
        return data


class TootCommentsError(Exception):
    """Base exception class for all toot-comments errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize TootCommentsError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class InfrastructureError(TootCommentsError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems: the
    Mastodon API, the file system holding the cache, or the network.
    """


class ApplicationError(TootCommentsError):
    """Application-level errors (configuration, startup, command handling)."""


class MastodonAPIError(InfrastructureError):
    """A call to the Mastodon API failed.

    Transport failures, non-2xx responses and undecodable bodies all map to
    this one type; callers do not distinguish between them.
    """


class ResolutionError(InfrastructureError):
    """The remote search needed to resolve a query to its roots failed."""


class FetchError(InfrastructureError):
    """Fetching the status or the descendants of a root failed."""


class PersistenceError(InfrastructureError):
    """Writing the root cache to disk failed.

    Logged by the cache and never propagated to a request.
    """


class LoadError(InfrastructureError):
    """Loading the root cache at startup failed.

    Logged by the cache, which then starts empty.
    """


def create_api_error(
    message: str,
    endpoint: str,
    code: ErrorCode = ErrorCode.API_REQUEST_FAILED,
    status_code: int | None = None,
    original_error: Exception | None = None,
) -> MastodonAPIError:
    """Create a Mastodon API error with context."""
    additional_data: dict[str, PrimitiveContextValue] = {"endpoint": endpoint}
    if status_code is not None:
        additional_data["status_code"] = status_code
    context = ErrorContext(
        operation="mastodon_request",
        additional_data=additional_data,
    )
    return MastodonAPIError(code, message, context, original_error)


def create_resolution_error(
    query: str,
    original_error: Exception | None = None,
) -> ResolutionError:
    """Create a resolution error for a failed root search."""
    context = ErrorContext(operation="resolve", query=query)
    return ResolutionError(
        ErrorCode.ROOT_RESOLUTION_FAILED,
        f"Could not determine roots for {query!r}",
        context,
        original_error,
    )


def create_fetch_error(
    root: str,
    code: ErrorCode,
    message: str,
    query: str | None = None,
    original_error: Exception | None = None,
) -> FetchError:
    """Create a fetch error for a failed status or descendant lookup."""
    context = ErrorContext(
        operation="get_result",
        query=query,
        additional_data={"root": root},
    )
    return FetchError(code, message, context, original_error)


def create_config_error(
    message: str,
    config_key: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation="load_settings",
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_INVALID,
        message,
        context,
        original_error,
    )
