r"""Callback types and data structures for observability.

Callbacks let callers observe the lifecycle of a request execution for
logging, metrics or debugging:

- on_request: Called before each attempt is sent
- on_retry: Called before each backoff wait
- on_reply: Called with the final reply (accepted or exhausted)
- on_failure: Called when the execution ends with a ``TransportError``

Example:
    ```pycon
    >>> from recast import Cast
    >>> from recast.callbacks import RetryInfo
    >>> from recast.retry import CallbackConfig
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"Retry {info.attempt}/{info.max_retries} in {info.wait_time:.1f}s")
    ...
    >>> cast = Cast().with_callbacks(CallbackConfig(on_retry=log_retry))

    ```
"""

from __future__ import annotations

__all__ = [
    "FailureInfo",
    "ReplyInfo",
    "RequestInfo",
    "RetryInfo",
    "invoke_on_failure",
    "invoke_on_reply",
    "invoke_on_request",
    "invoke_on_retry",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from recast.exceptions import TransportError
    from recast.reply import Reply


@dataclass
class RequestInfo:
    """Information passed to on_request callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt number (1-indexed). First attempt is 1.
        max_retries: Maximum number of retries configured.
    """

    url: str
    method: str
    attempt: int
    max_retries: int


@dataclass
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The retry number (1-indexed). First retry is 1.
        max_retries: Maximum number of retries configured.
        wait_time: The backoff wait in seconds before the retry.
        reason: Why the previous attempt is retried.
        error: The transport error of the previous attempt (if any).
        status_code: The status code of the previous attempt (if any).
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    wait_time: float
    reason: str
    error: Exception | None
    status_code: int | None


@dataclass
class ReplyInfo:
    """Information passed to on_reply callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method (e.g., "GET", "POST").
        reply: The final reply.
        exhausted: ``True`` if the retries were exhausted and the reply
            holds the last retried response.
    """

    url: str
    method: str
    reply: Reply
    exhausted: bool


@dataclass
class FailureInfo:
    """Information passed to on_failure callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempts: The number of attempts performed.
        max_retries: Maximum number of retries configured.
        error: The error raised to the caller.
        total_time: Total time spent on all attempts including backoff
            (seconds).
    """

    url: str
    method: str
    attempts: int
    max_retries: int
    error: TransportError
    total_time: float


def invoke_on_request(
    on_request: Callable[[RequestInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
) -> None:
    """Invoke on_request callback if provided.

    Args:
        on_request: Optional callback to invoke before each attempt.
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt number (1-indexed).
        max_retries: Maximum number of retries.
    """
    if on_request is not None:
        on_request(RequestInfo(url=url, method=method, attempt=attempt, max_retries=max_retries))


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
    wait_time: float,
    reason: str,
    error: Exception | None,
    status_code: int | None,
) -> None:
    """Invoke on_retry callback if provided.

    Args:
        on_retry: Optional callback to invoke before each backoff wait.
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The retry number (1-indexed).
        max_retries: Maximum number of retries.
        wait_time: The backoff wait in seconds.
        reason: Why the previous attempt is retried.
        error: The transport error of the previous attempt (if any).
        status_code: The status code of the previous attempt (if any).
    """
    if on_retry is not None:
        on_retry(
            RetryInfo(
                url=url,
                method=method,
                attempt=attempt,
                max_retries=max_retries,
                wait_time=wait_time,
                reason=reason,
                error=error,
                status_code=status_code,
            )
        )


def invoke_on_reply(
    on_reply: Callable[[ReplyInfo], None] | None,
    *,
    url: str,
    method: str,
    reply: Reply,
    exhausted: bool,
) -> None:
    """Invoke on_reply callback if provided."""
    if on_reply is not None:
        on_reply(ReplyInfo(url=url, method=method, reply=reply, exhausted=exhausted))


def invoke_on_failure(
    on_failure: Callable[[FailureInfo], None] | None,
    *,
    url: str,
    method: str,
    attempts: int,
    max_retries: int,
    error: TransportError,
    total_time: float,
) -> None:
    """Invoke on_failure callback if provided."""
    if on_failure is not None:
        on_failure(
            FailureInfo(
                url=url,
                method=method,
                attempts=attempts,
                max_retries=max_retries,
                error=error,
                total_time=total_time,
            )
        )
