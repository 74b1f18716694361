r"""Backoff strategies for retry delays.

This package provides the backoff strategies used to compute the wait
before each retry: constant, linear, exponential, and exponential with
equal, full or decorrelated jitter.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "DecorrelatedJitterBackoff",
    "EqualJitterBackoff",
    "ExponentialBackoff",
    "FullJitterBackoff",
    "LinearBackoff",
]

from recast.backoff.base import BaseBackoffStrategy
from recast.backoff.constant import ConstantBackoff
from recast.backoff.exponential import ExponentialBackoff
from recast.backoff.jitter import (
    DecorrelatedJitterBackoff,
    EqualJitterBackoff,
    FullJitterBackoff,
)
from recast.backoff.linear import LinearBackoff
