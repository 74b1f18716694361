r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before retrying a
    request based on the retry number.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the backoff delay for a given retry.

        Args:
            attempt: The retry number (1-indexed). For example,
                attempt=1 is the wait before the first retry, attempt=2
                the wait before the second retry, etc.

        Returns:
            The delay in seconds before the next attempt.

        Raises:
            ValueError: If ``attempt`` is lower than 1.
        """

    def fresh(self) -> BaseBackoffStrategy:
        """Return a strategy ready for a new request execution.

        Stateless strategies return themselves. Stateful strategies
        return a new instance so executions never share state.

        Returns:
            The strategy to use for one request execution.
        """
        return self


def check_attempt(attempt: int) -> None:
    """Check that a retry number is valid.

    Args:
        attempt: The retry number (1-indexed).

    Raises:
        ValueError: If ``attempt`` is lower than 1.
    """
    if attempt < 1:
        msg = f"attempt must be >= 1, got {attempt}"
        raise ValueError(msg)
