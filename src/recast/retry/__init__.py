r"""Retry execution for synchronous and asynchronous requests."""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "CallbackConfig",
    "CallbackManager",
    "RetryDecider",
    "RetryExecutor",
]

from recast.retry.config import CallbackConfig
from recast.retry.decider import RetryDecider
from recast.retry.executor import RetryExecutor
from recast.retry.executor_async import AsyncRetryExecutor
from recast.retry.manager import CallbackManager
