r"""Unit tests for RetryPolicy dataclass and the configuration defaults.

This file contains tests for the RetryPolicy dataclass in
core/config.py.
"""

from __future__ import annotations

import dataclasses

import httpx
import pytest
from coola.equality import objects_are_equal

from recast.backoff import ConstantBackoff, ExponentialBackoff, LinearBackoff
from recast.core import (
    DEFAULT_BACKOFF_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    RetryPolicy,
)
from recast.hooks import CallableRetryHook, RetryOnStatus


def test_default_values() -> None:
    assert DEFAULT_TIMEOUT == 10.0
    assert DEFAULT_MAX_RETRIES == 0
    assert DEFAULT_BACKOFF_DELAY == 0.3


#################################
#     Tests for RetryPolicy     #
#################################


def test_retry_policy_defaults() -> None:
    """Test that RetryPolicy uses correct default values."""
    policy = RetryPolicy()
    assert policy.max_retries == DEFAULT_MAX_RETRIES
    assert isinstance(policy.backoff_strategy, ExponentialBackoff)
    assert policy.backoff_strategy.base_delay == DEFAULT_BACKOFF_DELAY
    assert policy.hooks == ()
    assert policy.timeout is None


def test_retry_policy_default_strategies_are_not_shared() -> None:
    assert RetryPolicy().backoff_strategy is not RetryPolicy().backoff_strategy


@pytest.mark.parametrize("max_retries", [0, 3, 10])
def test_retry_policy_max_attempts(max_retries: int) -> None:
    policy = RetryPolicy(max_retries=max_retries)
    assert policy.max_retries == max_retries
    assert policy.max_attempts == max_retries + 1


@pytest.mark.parametrize("max_retries", [-1, -10])
def test_retry_policy_negative_max_retries(max_retries: int) -> None:
    with pytest.raises(ValueError, match=r"max_retries must be >= 0"):
        RetryPolicy(max_retries=max_retries)


@pytest.mark.parametrize("max_retries", [1.5, "3", True])
def test_retry_policy_non_integer_max_retries(max_retries: object) -> None:
    with pytest.raises(ValueError, match=r"max_retries must be an integer"):
        RetryPolicy(max_retries=max_retries)  # type: ignore[arg-type]


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_retry_policy_invalid_timeout(timeout: float) -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        RetryPolicy(timeout=timeout)


def test_retry_policy_invalid_backoff_strategy() -> None:
    with pytest.raises(TypeError, match=r"backoff_strategy must be a BaseBackoffStrategy"):
        RetryPolicy(backoff_strategy=1.0)  # type: ignore[arg-type]


def test_retry_policy_wraps_plain_function_hooks() -> None:
    hook = RetryOnStatus(503)

    def func(response: httpx.Response) -> str | None:
        return None

    policy = RetryPolicy(hooks=[hook, func])
    assert isinstance(policy.hooks, tuple)
    assert policy.hooks[0] is hook
    assert isinstance(policy.hooks[1], CallableRetryHook)
    assert policy.hooks[1].func is func


def test_retry_policy_invalid_hook() -> None:
    with pytest.raises(TypeError, match=r"retry hook must be callable"):
        RetryPolicy(hooks=[42])  # type: ignore[list-item]


def test_retry_policy_is_frozen() -> None:
    policy = RetryPolicy()
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.max_retries = 5  # type: ignore[misc]


def test_retry_policy_merge() -> None:
    strategy = ConstantBackoff(delay=1.0)
    policy = RetryPolicy(max_retries=2, backoff_strategy=strategy, timeout=5.0)
    merged = policy.merge(max_retries=4, timeout=None, backoff_strategy=None)
    assert merged.max_retries == 4
    assert merged.timeout == 5.0
    assert merged.backoff_strategy is strategy
    assert policy.max_retries == 2


def test_retry_policy_merge_validates() -> None:
    with pytest.raises(ValueError, match=r"max_retries must be >= 0"):
        RetryPolicy().merge(max_retries=-1)


def test_retry_policy_equality() -> None:
    strategy = LinearBackoff(slope=1.0)
    hook = RetryOnStatus(500)
    assert objects_are_equal(
        RetryPolicy(max_retries=1, backoff_strategy=strategy, hooks=(hook,)),
        RetryPolicy(max_retries=1, backoff_strategy=strategy, hooks=(hook,)),
    )
