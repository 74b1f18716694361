r"""Callback manager for orchestrating retry lifecycle events."""

from __future__ import annotations

__all__ = ["CallbackManager"]

import time
from typing import TYPE_CHECKING

from recast.callbacks import (
    invoke_on_failure,
    invoke_on_reply,
    invoke_on_request,
    invoke_on_retry,
)

if TYPE_CHECKING:
    from recast.exceptions import TransportError
    from recast.reply import Reply
    from recast.retry.config import CallbackConfig


class CallbackManager:
    """Manages callback invocations during a request execution.

    Attributes:
        callbacks: Configuration containing callback functions for
            lifecycle events.
    """

    def __init__(self, callbacks: CallbackConfig) -> None:
        self.callbacks = callbacks

    def on_request(self, url: str, method: str, attempt: int, max_retries: int) -> None:
        """Invoke on_request callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: The attempt number (1-indexed).
            max_retries: Maximum number of retries.
        """
        invoke_on_request(
            self.callbacks.on_request,
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
        )

    def on_retry(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        wait_time: float,
        reason: str,
        error: Exception | None,
        status_code: int | None,
    ) -> None:
        """Invoke on_retry callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: The retry number (1-indexed).
            max_retries: Maximum number of retries.
            wait_time: The backoff wait in seconds.
            reason: Why the previous attempt is retried.
            error: Transport error of the previous attempt (if any).
            status_code: Status code of the previous attempt (if any).
        """
        invoke_on_retry(
            self.callbacks.on_retry,
            url=url,
            method=method,
            attempt=attempt,
            max_retries=max_retries,
            wait_time=wait_time,
            reason=reason,
            error=error,
            status_code=status_code,
        )

    def on_reply(self, reply: Reply, exhausted: bool) -> None:
        """Invoke on_reply callback.

        Args:
            reply: The final reply.
            exhausted: Whether the retries were exhausted.
        """
        invoke_on_reply(
            self.callbacks.on_reply,
            url=reply.url,
            method=reply.method,
            reply=reply,
            exhausted=exhausted,
        )

    def on_failure(self, error: TransportError, max_retries: int, start_time: float) -> None:
        """Invoke on_failure callback.

        Args:
            error: The error raised to the caller.
            max_retries: Maximum number of retries.
            start_time: Timestamp when the execution started.
        """
        invoke_on_failure(
            self.callbacks.on_failure,
            url=error.url,
            method=error.method,
            attempts=error.attempts,
            max_retries=max_retries,
            error=error,
            total_time=time.time() - start_time,
        )
