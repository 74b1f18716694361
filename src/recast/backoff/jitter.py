r"""Exponential backoff strategies with jitter.

Jitter randomizes the exponential delay so that clients failing at the
same time do not retry in lockstep. The three variants follow the usual
"equal", "full" and "decorrelated" jitter formulas.
"""

from __future__ import annotations

__all__ = ["DecorrelatedJitterBackoff", "EqualJitterBackoff", "FullJitterBackoff"]

import random

from recast.backoff.base import check_attempt
from recast.backoff.exponential import ExponentialBackoff


class EqualJitterBackoff(ExponentialBackoff):
    """Exponential backoff with equal jitter.

    Calculates delay as: half of the exponential delay plus a random value
    between 0 and the other half.

    Args:
        base_delay: The delay before the first retry (default: 0.3).
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from recast.backoff import EqualJitterBackoff
        >>> backoff = EqualJitterBackoff(base_delay=1.0, max_delay=8.0)
        >>> 2.0 <= backoff.calculate(3) <= 4.0
        True

        ```
    """

    def calculate(self, attempt: int) -> float:
        check_attempt(attempt)
        half = self._exponential(attempt) / 2
        return half + random.uniform(0, half)  # noqa: S311


class FullJitterBackoff(ExponentialBackoff):
    """Exponential backoff with full jitter.

    Calculates delay as a random value between 0 and the exponential delay.

    Args:
        base_delay: The delay before the first retry (default: 0.3).
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from recast.backoff import FullJitterBackoff
        >>> backoff = FullJitterBackoff(base_delay=1.0, max_delay=8.0)
        >>> 0.0 <= backoff.calculate(3) <= 4.0
        True

        ```
    """

    def calculate(self, attempt: int) -> float:
        check_attempt(attempt)
        return random.uniform(0, self._exponential(attempt))  # noqa: S311


class DecorrelatedJitterBackoff(ExponentialBackoff):
    """Exponential backoff with decorrelated jitter.

    Calculates delay as: min(max_delay, random(base_delay, previous * 3))
    where ``previous`` is the delay returned by the previous call and
    starts at ``base_delay``. The result depends on the call history, not
    on ``attempt``.

    Warning:
        This strategy keeps state between calls and is NOT thread safe.
        Do not share one instance between requests running at the same
        time. The retry executors call ``fresh()`` at the start of each
        execution, so a strategy configured on a builder is never mutated
        by concurrent requests.

    Args:
        base_delay: The minimum delay and initial previous delay
            (default: 0.3).
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from recast.backoff import DecorrelatedJitterBackoff
        >>> backoff = DecorrelatedJitterBackoff(base_delay=1.0, max_delay=10.0)
        >>> 1.0 <= backoff.calculate(1) <= 3.0
        True

        ```
    """

    def __init__(self, base_delay: float = 0.3, max_delay: float | None = None) -> None:
        super().__init__(base_delay=base_delay, max_delay=max_delay)
        self.previous_delay = base_delay

    def calculate(self, attempt: int) -> float:
        check_attempt(attempt)
        delay = random.uniform(self.base_delay, self.previous_delay * 3)  # noqa: S311
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        self.previous_delay = delay
        return delay

    def fresh(self) -> DecorrelatedJitterBackoff:
        return DecorrelatedJitterBackoff(base_delay=self.base_delay, max_delay=self.max_delay)
