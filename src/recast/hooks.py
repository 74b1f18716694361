r"""Retry hooks deciding whether a response should be retried.

A retry hook looks at a response and returns a reason string to request
a retry, or ``None`` to accept the response. Hooks are evaluated in
order and the first reason wins.

Example:
    ```pycon
    >>> import httpx
    >>> from recast.hooks import RetryOnStatus, evaluate_hooks
    >>> hooks = (RetryOnStatus(500, 503),)
    >>> evaluate_hooks(hooks, httpx.Response(503))
    'status 503'
    >>> evaluate_hooks(hooks, httpx.Response(200)) is None
    True

    ```
"""

from __future__ import annotations

__all__ = [
    "BaseRetryHook",
    "CallableRetryHook",
    "RetryHook",
    "RetryOnBodyMatch",
    "RetryOnServerError",
    "RetryOnStatus",
    "as_retry_hook",
    "evaluate_hooks",
]

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Optional, Union

import httpx

if TYPE_CHECKING:
    from collections.abc import Iterable

logger: logging.Logger = logging.getLogger(__name__)


class BaseRetryHook(ABC):
    """Abstract base class for retry hooks."""

    @abstractmethod
    def evaluate(self, response: httpx.Response) -> str | None:
        """Evaluate a response.

        Args:
            response: The response received for the current attempt.

        Returns:
            A reason string if the request should be retried,
            otherwise ``None``.
        """

    def __call__(self, response: httpx.Response) -> str | None:
        return self.evaluate(response)


class RetryOnStatus(BaseRetryHook):
    """Retry when the response status code is one of the given codes.

    Args:
        *status_codes: The status codes that trigger a retry.

    Example:
        ```pycon
        >>> import httpx
        >>> from recast.hooks import RetryOnStatus
        >>> hook = RetryOnStatus(429, 503)
        >>> hook.evaluate(httpx.Response(429))
        'status 429'

        ```
    """

    def __init__(self, *status_codes: int) -> None:
        if not status_codes:
            msg = "at least one status code is required"
            raise ValueError(msg)
        self.status_codes = frozenset(status_codes)

    def __repr__(self) -> str:
        codes = ", ".join(str(code) for code in sorted(self.status_codes))
        return f"{self.__class__.__qualname__}({codes})"

    def evaluate(self, response: httpx.Response) -> str | None:
        if response.status_code in self.status_codes:
            return f"status {response.status_code}"
        return None


class RetryOnServerError(BaseRetryHook):
    """Retry on any 5xx status code."""

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"

    def evaluate(self, response: httpx.Response) -> str | None:
        if 500 <= response.status_code <= 599:
            return f"server error {response.status_code}"
        return None


class RetryOnBodyMatch(BaseRetryHook):
    """Retry when the response body matches a regular expression.

    The retry executors read the body before evaluating hooks, so the
    body is available here and still ends up in the final reply.

    Args:
        pattern: The regular expression searched in the decoded body.

    Example:
        ```pycon
        >>> import httpx
        >>> from recast.hooks import RetryOnBodyMatch
        >>> hook = RetryOnBodyMatch(r"try again")
        >>> hook.evaluate(httpx.Response(200, text="busy, try again later"))
        "body matches 'try again'"

        ```
    """

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.pattern = re.compile(pattern)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self.pattern.pattern!r})"

    def evaluate(self, response: httpx.Response) -> str | None:
        response.read()
        if self.pattern.search(response.text):
            return f"body matches {self.pattern.pattern!r}"
        return None


class CallableRetryHook(BaseRetryHook):
    """Adapt a plain function into a retry hook.

    Args:
        func: A function taking a response and returning a reason string
            or ``None``.
    """

    def __init__(self, func: Callable[[httpx.Response], str | None]) -> None:
        self.func = func

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self.func!r})"

    def evaluate(self, response: httpx.Response) -> str | None:
        return self.func(response)


RetryHook = Union[BaseRetryHook, Callable[[httpx.Response], Optional[str]]]


def as_retry_hook(hook: RetryHook) -> BaseRetryHook:
    """Return ``hook`` as a ``BaseRetryHook``.

    Args:
        hook: A retry hook or a plain function.

    Returns:
        The hook itself or the function wrapped in a
        ``CallableRetryHook``.

    Raises:
        TypeError: If ``hook`` is not callable.
    """
    if isinstance(hook, BaseRetryHook):
        return hook
    if not callable(hook):
        msg = f"retry hook must be callable, got {type(hook).__name__}"
        raise TypeError(msg)
    return CallableRetryHook(hook)


def evaluate_hooks(hooks: Iterable[BaseRetryHook], response: httpx.Response) -> str | None:
    """Evaluate hooks in order and return the first retry reason.

    Args:
        hooks: The retry hooks to evaluate.
        response: The response received for the current attempt.

    Returns:
        The reason of the first hook requesting a retry, or ``None`` if
        every hook accepts the response.
    """
    for hook in hooks:
        reason = hook.evaluate(response)
        if reason is not None:
            logger.debug(f"{hook!r} requested a retry: {reason}")
            return reason
    return None
