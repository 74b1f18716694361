r"""Linear backoff strategy."""

from __future__ import annotations

__all__ = ["LinearBackoff"]

from recast.backoff.base import BaseBackoffStrategy, check_attempt


class LinearBackoff(BaseBackoffStrategy):
    """Linear backoff strategy.

    Calculates delay as: slope * attempt, with optional max_delay cap.

    Args:
        slope: The delay increment in seconds per retry (default: 1.0).
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from recast.backoff import LinearBackoff
        >>> backoff = LinearBackoff(slope=0.5)
        >>> backoff.calculate(1)
        0.5
        >>> backoff.calculate(4)
        2.0
        >>> backoff = LinearBackoff(slope=2.0, max_delay=5.0)
        >>> backoff.calculate(6)  # Would be 12.0, but capped
        5.0

        ```
    """

    def __init__(self, slope: float = 1.0, max_delay: float | None = None) -> None:
        if slope < 0:
            msg = f"slope must be non-negative, got {slope}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.slope = slope
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(slope={self.slope}, max_delay={self.max_delay})"

    def calculate(self, attempt: int) -> float:
        """Calculate linear backoff delay.

        Args:
            attempt: The retry number (1-indexed).

        Returns:
            The delay: slope * attempt, capped at max_delay if set.
        """
        check_attempt(attempt)
        delay = self.slope * attempt
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
