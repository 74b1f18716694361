r"""Defaults and retry policy configuration.

This module provides the default values used by recast and the immutable
``RetryPolicy`` describing how a request is retried.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RetryPolicy",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from recast.backoff import BaseBackoffStrategy, ExponentialBackoff
from recast.core.validation import validate_retry_params
from recast.hooks import as_retry_hook

if TYPE_CHECKING:
    from recast.hooks import BaseRetryHook

# Overall timeout in seconds of the default transport, created when no
# client is injected. The per-attempt timeout of a policy is separate.
DEFAULT_TIMEOUT = 10.0

# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 0

# Wait before the first retry with the default exponential backoff
# With 0.3: 1st retry waits 0.3s, 2nd waits 0.6s, 3rd waits 1.2s
DEFAULT_BACKOFF_DELAY = 0.3


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy of a request.

    Args:
        max_retries: Maximum number of retries. Must be >= 0. The request
            is sent at most ``max_retries + 1`` times.
        backoff_strategy: Strategy computing the wait before each retry.
            Defaults to ``ExponentialBackoff(base_delay=0.3)``.
        hooks: Retry hooks evaluated in order on every response. Plain
            functions are wrapped into ``CallableRetryHook``.
        timeout: Optional per-attempt timeout in seconds. Each attempt gets
            its own deadline.

    Example:
        ```pycon
        >>> from recast.core.config import RetryPolicy
        >>> from recast.hooks import RetryOnStatus
        >>> policy = RetryPolicy(max_retries=2, hooks=[RetryOnStatus(503)])
        >>> policy.max_attempts
        3
        >>> policy.merge(max_retries=5).max_retries
        5
        >>> policy.max_retries  # Original unchanged
        2

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_strategy: BaseBackoffStrategy = field(
        default_factory=lambda: ExponentialBackoff(base_delay=DEFAULT_BACKOFF_DELAY)
    )
    hooks: tuple[BaseRetryHook, ...] = ()
    timeout: float | None = None

    def __post_init__(self) -> None:
        validate_retry_params(max_retries=self.max_retries, timeout=self.timeout)
        if not isinstance(self.backoff_strategy, BaseBackoffStrategy):
            msg = (
                "backoff_strategy must be a BaseBackoffStrategy, "
                f"got {type(self.backoff_strategy).__name__}"
            )
            raise TypeError(msg)
        object.__setattr__(self, "hooks", tuple(as_retry_hook(hook) for hook in self.hooks))

    @property
    def max_attempts(self) -> int:
        """The maximum number of times the request is sent."""
        return self.max_retries + 1

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with the given parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ``RetryPolicy``.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
