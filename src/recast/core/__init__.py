r"""Configuration defaults and validation shared by the sync and async
executors."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RetryPolicy",
    "validate_method",
    "validate_retry_params",
    "validate_timeout",
]

from recast.core.config import (
    DEFAULT_BACKOFF_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    RetryPolicy,
)
from recast.core.validation import validate_method, validate_retry_params, validate_timeout
