r"""Exceptions raised by recast.

All library errors derive from ``RecastError`` so callers can catch the
whole family at once. Assembly errors (template, body, query) are raised
before any request is sent; ``TransportError`` is raised when a request
could not be completed at the network level.
"""

from __future__ import annotations

__all__ = [
    "BodyEncodingError",
    "DecodeError",
    "QueryEncodingError",
    "RecastError",
    "TemplateExpansionError",
    "TransportError",
]


class RecastError(Exception):
    """Base class for all recast errors."""


class TemplateExpansionError(RecastError):
    """Raised when a path template cannot be expanded.

    Args:
        template: The path template that failed to expand.
        message: The error message.
    """

    def __init__(self, template: str, message: str) -> None:
        super().__init__(message)
        self.template = template


class BodyEncodingError(RecastError):
    """Raised when a request body cannot be serialized.

    Args:
        content_type: The content type of the body being encoded.
        message: The error message.
    """

    def __init__(self, content_type: str, message: str) -> None:
        super().__init__(message)
        self.content_type = content_type


class QueryEncodingError(RecastError):
    """Raised when a structured query value cannot be serialized."""


class DecodeError(RecastError):
    """Raised when a reply body cannot be decoded."""


class TransportError(RecastError):
    """Raised when a request fails at the transport level.

    This error is raised either when the last attempt ended with a network
    failure (timeouts, connection errors) or immediately when the failure is
    not retryable (e.g. an unsupported URL scheme).

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        message: The error message.
        attempts: The number of attempts performed.
        cause: The original exception raised by the transport.

    Example:
        ```pycon
        >>> from recast.exceptions import TransportError
        >>> error = TransportError(
        ...     method="GET",
        ...     url="https://api.example.com/data",
        ...     message="GET request to https://api.example.com/data failed",
        ...     attempts=3,
        ... )
        >>> error.attempts
        3

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        attempts: int = 1,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.attempts = attempts
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"attempts={self.attempts})"
        )
