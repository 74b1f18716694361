r"""Configuration dataclass for lifecycle callbacks."""

from __future__ import annotations

__all__ = ["CallbackConfig"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from recast.callbacks import FailureInfo, ReplyInfo, RequestInfo, RetryInfo


@dataclass(frozen=True)
class CallbackConfig:
    """Configuration for callbacks.

    Attributes:
        on_request: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each backoff wait.
        on_reply: Optional callback invoked with the final reply.
        on_failure: Optional callback invoked when the execution raises a
            ``TransportError``.
    """

    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_reply: Callable[[ReplyInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None
