r"""Retry decision logic.

This module provides the RetryDecider class that decides whether an
attempt should be retried, from the response through the retry hooks or
from the transport error that ended the attempt.
"""

from __future__ import annotations

__all__ = ["NON_RETRYABLE_ERRORS", "RetryDecider"]

import logging
from typing import TYPE_CHECKING

import httpx

from recast.hooks import evaluate_hooks

if TYPE_CHECKING:
    from collections.abc import Sequence

    from recast.hooks import BaseRetryHook

logger: logging.Logger = logging.getLogger(__name__)

# Failures caused by the request itself: sending it again cannot succeed
NON_RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    httpx.UnsupportedProtocol,
    httpx.LocalProtocolError,
    httpx.TooManyRedirects,
    httpx.DecodingError,
)


class RetryDecider:
    """Decides whether an attempt should be retried.

    Args:
        hooks: The retry hooks evaluated in order on every response.
    """

    def __init__(self, hooks: Sequence[BaseRetryHook]) -> None:
        self.hooks = tuple(hooks)

    def should_retry_response(self, response: httpx.Response) -> str | None:
        """Evaluate the retry hooks on a response.

        Args:
            response: The response of the current attempt, body read.

        Returns:
            The reason of the first hook requesting a retry, or ``None``
            to accept the response.
        """
        return evaluate_hooks(self.hooks, response)

    def should_retry_exception(self, exc: Exception) -> str | None:
        """Decide whether a transport error should be retried.

        Transport errors are retried regardless of the hooks, except the
        errors caused by the request itself.

        Args:
            exc: The error raised by the transport.

        Returns:
            The retry reason, or ``None`` if the error is not retryable.
        """
        if isinstance(exc, NON_RETRYABLE_ERRORS):
            logger.debug(f"{type(exc).__name__} is not retryable: {exc}")
            return None
        return type(exc).__name__
