r"""recast - Fluent HTTP request builder with pluggable retry policies.

This package builds HTTP requests from a declarative description (method,
URL template, headers, query parameters, body and credentials), sends
them through ``httpx`` and retries them according to a backoff strategy
and a list of retry hooks.

Key Features:
    - Immutable fluent builder: every ``with_*`` call returns a new builder
    - Path templates, structured query parameters and header merge modes
    - JSON, XML, plain text and URL-encoded form bodies
    - Constant, linear, exponential and jittered backoff strategies
    - Retry hooks on status codes, server errors, body content or any function
    - Per-attempt timeouts, synchronous and asynchronous execution
    - Callbacks and structured logging for observability

Example:
    ```pycon
    >>> from recast import Cast, RetryOnServerError
    >>> api = (
    ...     Cast()
    ...     .with_base_url("https://api.example.com")
    ...     .with_retry(3)
    ...     .with_exponential_backoff(0.5, max_delay=5.0)
    ...     .add_retry_hooks(RetryOnServerError())
    ... )
    >>> reply = api.with_api("/users/{id}").with_path_params({"id": 42}).request()  # doctest: +SKIP
    >>> reply.status_code  # doctest: +SKIP
    200

    ```
"""

from __future__ import annotations

__all__ = [
    "BasicAuth",
    "BodyEncodingError",
    "CallbackConfig",
    "Cast",
    "ConstantBackoff",
    "DecodeError",
    "DecorrelatedJitterBackoff",
    "EqualJitterBackoff",
    "ExponentialBackoff",
    "FullJitterBackoff",
    "LinearBackoff",
    "QueryEncodingError",
    "RecastError",
    "Reply",
    "RequestSpec",
    "RetryOnBodyMatch",
    "RetryOnServerError",
    "RetryOnStatus",
    "RetryPolicy",
    "TemplateExpansionError",
    "TransportError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from recast.backoff import (
    ConstantBackoff,
    DecorrelatedJitterBackoff,
    EqualJitterBackoff,
    ExponentialBackoff,
    FullJitterBackoff,
    LinearBackoff,
)
from recast.builder import Cast
from recast.core.config import RetryPolicy
from recast.exceptions import (
    BodyEncodingError,
    DecodeError,
    QueryEncodingError,
    RecastError,
    TemplateExpansionError,
    TransportError,
)
from recast.hooks import RetryOnBodyMatch, RetryOnServerError, RetryOnStatus
from recast.reply import Reply
from recast.request import BasicAuth, RequestSpec
from recast.retry import CallbackConfig

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
