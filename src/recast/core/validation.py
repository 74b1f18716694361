r"""Parameter validation utilities for requests and retry policies.

This module provides validation functions to ensure parameters meet
their constraints before a request is executed.
"""

from __future__ import annotations

__all__ = ["validate_method", "validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float | None, name: str = "timeout") -> None:
    """Validate a timeout parameter.

    Args:
        timeout: Timeout in seconds, or ``None`` for no timeout.
            Must be > 0 if provided.
        name: The parameter name used in the error message.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from recast.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(None)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout is not None and timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(max_retries: int, timeout: float | None = None) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retries. Must be >= 0. A value of
            0 means no retries (only the initial attempt).
        timeout: Optional per-attempt timeout in seconds. Must be > 0 if
            provided.

    Raises:
        ValueError: If max_retries is negative or not an integer, or if
            timeout is non-positive.

    Example:
        ```pycon
        >>> from recast.core.validation import validate_retry_params
        >>> validate_retry_params(max_retries=3)
        >>> validate_retry_params(max_retries=0, timeout=2.5)

        ```
    """
    if isinstance(max_retries, bool) or not isinstance(max_retries, int):
        msg = f"max_retries must be an integer, got {type(max_retries).__name__}"
        raise ValueError(msg)
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    validate_timeout(timeout)


def validate_method(method: str) -> None:
    """Validate an HTTP method name.

    Args:
        method: The HTTP method, e.g. ``"GET"``.

    Raises:
        ValueError: If the method is empty or contains whitespace.
    """
    if not method or any(char.isspace() for char in method):
        msg = f"invalid HTTP method {method!r}"
        raise ValueError(msg)
