r"""Shared core logic for retry executors.

This module provides helper functions used by both the synchronous and
the asynchronous retry executors: building the request of an attempt,
turning transport failures into ``TransportError`` and building the
final ``Reply``.
"""

from __future__ import annotations

__all__ = [
    "build_reply",
    "create_transport_error",
    "prepare_request",
]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from recast.exceptions import TransportError
from recast.reply import Reply
from recast.request.assembler import assemble
from recast.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from recast.request.spec import RequestSpec

logger: logging.Logger = logging.getLogger(__name__)


def prepare_request(
    spec: RequestSpec,
    client: httpx.Client | httpx.AsyncClient,
    timeout: float | None,
    attempt: int,
) -> httpx.Request:
    """Assemble a fresh request for one attempt.

    Args:
        spec: The request description.
        client: The client sending the request.
        timeout: Optional per-attempt timeout in seconds.
        attempt: The attempt number (1-indexed).

    Returns:
        A new request, with its own body stream and timeout.

    Raises:
        TemplateExpansionError: If the path template cannot be expanded.
        QueryEncodingError: If the query parameters cannot be encoded.
        BodyEncodingError: If the body cannot be encoded.
        TransportError: If the resulting URL is malformed.
    """
    try:
        return assemble(spec, client=client, timeout=timeout)
    except httpx.InvalidURL as exc:
        raise TransportError(
            method=spec.method,
            url=spec.url_template,
            message=f"{spec.method} request to {spec.url_template} has an invalid URL: {exc}",
            attempts=attempt,
            cause=exc,
        ) from exc


def create_transport_error(
    exc: Exception,
    url: str,
    method: str,
    attempts: int,
) -> TransportError:
    """Create a TransportError from a transport exception.

    Args:
        exc: The exception that occurred.
        url: The URL being requested.
        method: The HTTP method being used.
        attempts: The number of attempts performed.

    Returns:
        TransportError with appropriate message.
    """
    if isinstance(exc, httpx.TimeoutException):
        message = f"{method} request to {url} timed out ({attempts} attempts)"
    else:
        message = f"{method} request to {url} failed after {attempts} attempts: {exc}"
    return TransportError(method=method, url=url, message=message, attempts=attempts, cause=exc)


def build_reply(response: httpx.Response, start_time: float, attempts: int, exhausted: bool) -> Reply:
    """Build the final reply from a response whose body was read.

    Args:
        response: The final response.
        start_time: Timestamp when the execution started.
        attempts: The number of attempts performed.
        exhausted: Whether the retries were exhausted.

    Returns:
        The reply.
    """
    reply = Reply.from_response(response, cost=time.time() - start_time, attempts=attempts)
    if exhausted:
        logger.debug(
            f"{reply.method} request to {reply.url} exhausted its retries, "
            f"returning status {reply.status_code}"
        )
    log_structured(
        logger,
        logging.DEBUG,
        f"{reply.method} {reply.url} took {reply.cost:.3f}s upto {reply.attempts} time(s)",
        url=reply.url,
        method=reply.method,
        status_code=reply.status_code,
        attempts=reply.attempts,
        cost=reply.cost,
        exhausted=exhausted,
    )
    return reply
