r"""Immutable fluent builder for HTTP requests with retries.

This module provides ``Cast``, the entry point of recast. Each ``with_*``
method returns a new builder, so a configured builder can be shared and
extended freely. ``request()`` and ``arequest()`` run the request through
the synchronous or asynchronous retry executor.
"""

from __future__ import annotations

__all__ = ["Cast"]

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import httpx

from recast.backoff import (
    ConstantBackoff,
    DecorrelatedJitterBackoff,
    EqualJitterBackoff,
    ExponentialBackoff,
    FullJitterBackoff,
    LinearBackoff,
)
from recast.core.config import DEFAULT_TIMEOUT, RetryPolicy
from recast.request.auth import BasicAuth
from recast.request.body import FormBody, JsonBody, PlainBody, XmlBody
from recast.request.headers import HeaderMergeMode, merge_headers
from recast.request.spec import RequestSpec
from recast.retry import AsyncRetryExecutor, CallbackConfig, RetryExecutor

if TYPE_CHECKING:
    from collections.abc import Mapping
    from xml.etree.ElementTree import Element

    from recast.backoff import BaseBackoffStrategy
    from recast.hooks import RetryHook
    from recast.reply import Reply
    from recast.request.headers import HeadersLike

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cast:
    r"""Immutable builder describing a request and how to retry it.

    Args:
        spec: The request description.
        policy: The retry policy.
        callbacks: The lifecycle callbacks.
        client: Optional ``httpx.Client`` used by ``request()``. If
            ``None``, a client is created and closed for every call.
        async_client: Optional ``httpx.AsyncClient`` used by
            ``arequest()``. If ``None``, a client is created and closed for
            every call.

    Example:
        ```pycon
        >>> from recast import Cast, RetryOnStatus
        >>> api = Cast().with_base_url("https://api.example.com").with_retry(3)
        >>> users = api.with_api("/users/{id}").with_path_params({"id": 42})
        >>> users.spec.path_template
        '/users/{id}'
        >>> api.spec.path_template  # Original unchanged
        ''
        >>> reply = users.add_retry_hooks(RetryOnStatus(503)).request()  # doctest: +SKIP

        ```
    """

    spec: RequestSpec = field(default_factory=RequestSpec)
    policy: RetryPolicy = field(default_factory=RetryPolicy)
    callbacks: CallbackConfig = field(default_factory=CallbackConfig)
    client: httpx.Client | None = field(default=None, compare=False)
    async_client: httpx.AsyncClient | None = field(default=None, compare=False)

    def with_base_url(self, base_url: str) -> Cast:
        """Set the URL prefix, e.g. ``"https://api.example.com"``."""
        return self._with_spec(base_url=base_url)

    def with_api(self, api: str) -> Cast:
        """Set the path template appended to the base URL.

        Args:
            api: The path template, e.g. ``"/users/{id}"``. Placeholders
                are filled from the path parameters.

        Returns:
            A new builder.
        """
        return self._with_spec(path_template=api)

    def with_method(self, method: str) -> Cast:
        """Set the HTTP method."""
        return self._with_spec(method=method)

    def append_headers(self, headers: HeadersLike) -> Cast:
        """Add headers, keeping the values already configured."""
        return self._with_spec(
            headers=merge_headers(self.spec.headers, headers, HeaderMergeMode.APPEND)
        )

    def set_headers(self, headers: HeadersLike) -> Cast:
        """Set headers, replacing the values of every name being set."""
        return self._with_spec(
            headers=merge_headers(self.spec.headers, headers, HeaderMergeMode.REPLACE)
        )

    def with_query_params(self, params: Any) -> Cast:
        """Set the query parameters.

        Args:
            params: A mapping or a dataclass instance, encoded into the
                query string and merged with the query of the URL.

        Returns:
            A new builder.
        """
        return self._with_spec(query_params=params)

    def with_path_params(self, params: Mapping[str, Any]) -> Cast:
        """Set the values of the path template placeholders."""
        return self._with_spec(path_params=params)

    def with_json_body(self, payload: Any) -> Cast:
        """Send ``payload`` encoded as JSON."""
        return self._with_spec(body=JsonBody(payload))

    def with_xml_body(self, payload: Element | Mapping[str, Any] | str | bytes) -> Cast:
        """Send ``payload`` encoded as XML."""
        return self._with_spec(body=XmlBody(payload))

    def with_plain_body(self, payload: str) -> Cast:
        """Send ``payload`` as plain text."""
        return self._with_spec(body=PlainBody(payload))

    def with_form_body(self, payload: Any) -> Cast:
        """Send ``payload`` as an URL-encoded form."""
        return self._with_spec(body=FormBody(payload))

    def with_basic_auth(self, username: str, password: str) -> Cast:
        """Attach basic authentication credentials to every attempt."""
        return self._with_spec(auth=BasicAuth(username, password))

    def with_retry(self, max_retries: int) -> Cast:
        """Set the maximum number of retries.

        Args:
            max_retries: The maximum number of retries. The request is
                sent at most ``max_retries + 1`` times.

        Returns:
            A new builder.

        Raises:
            ValueError: If ``max_retries`` is negative.
        """
        return self._with_policy(max_retries=max_retries)

    def with_backoff(self, strategy: BaseBackoffStrategy) -> Cast:
        """Set the backoff strategy."""
        return self._with_policy(backoff_strategy=strategy)

    def with_constant_backoff(self, delay: float) -> Cast:
        """Wait ``delay`` seconds before every retry."""
        return self.with_backoff(ConstantBackoff(delay=delay))

    def with_linear_backoff(self, slope: float, max_delay: float | None = None) -> Cast:
        """Wait ``slope * n`` seconds before the n-th retry."""
        return self.with_backoff(LinearBackoff(slope=slope, max_delay=max_delay))

    def with_exponential_backoff(self, base_delay: float, max_delay: float | None = None) -> Cast:
        """Wait ``base_delay * 2 ** (n - 1)`` seconds before the n-th retry."""
        return self.with_backoff(ExponentialBackoff(base_delay=base_delay, max_delay=max_delay))

    def with_exponential_equal_jitter_backoff(
        self, base_delay: float, max_delay: float | None = None
    ) -> Cast:
        """Use exponential backoff with equal jitter."""
        return self.with_backoff(EqualJitterBackoff(base_delay=base_delay, max_delay=max_delay))

    def with_exponential_full_jitter_backoff(
        self, base_delay: float, max_delay: float | None = None
    ) -> Cast:
        """Use exponential backoff with full jitter."""
        return self.with_backoff(FullJitterBackoff(base_delay=base_delay, max_delay=max_delay))

    def with_exponential_decorrelated_jitter_backoff(
        self, base_delay: float, max_delay: float | None = None
    ) -> Cast:
        """Use exponential backoff with decorrelated jitter.

        Every request execution starts from a fresh copy of the strategy,
        so concurrent requests from one builder do not share its state.
        """
        return self.with_backoff(
            DecorrelatedJitterBackoff(base_delay=base_delay, max_delay=max_delay)
        )

    def add_retry_hooks(self, *hooks: RetryHook) -> Cast:
        """Append retry hooks, evaluated after the ones already configured.

        Args:
            *hooks: Retry hooks or plain functions taking a response and
                returning a reason string or ``None``.

        Returns:
            A new builder.
        """
        return self._with_policy(hooks=self.policy.hooks + tuple(hooks))

    def with_timeout(self, timeout: float) -> Cast:
        """Set the per-attempt timeout in seconds.

        Raises:
            ValueError: If ``timeout`` is not positive.
        """
        return self._with_policy(timeout=timeout)

    def with_callbacks(self, callbacks: CallbackConfig) -> Cast:
        """Set the lifecycle callbacks."""
        return replace(self, callbacks=callbacks)

    def with_client(self, client: httpx.Client) -> Cast:
        """Send synchronous requests through ``client``."""
        return replace(self, client=client)

    def with_async_client(self, client: httpx.AsyncClient) -> Cast:
        """Send asynchronous requests through ``client``."""
        return replace(self, async_client=client)

    def request(self, client: httpx.Client | None = None) -> Reply:
        """Send the request, retrying it according to the policy.

        Args:
            client: Optional client overriding the configured one. If no
                client is available, one is created with
                ``DEFAULT_TIMEOUT`` and closed afterwards.

        Returns:
            The reply. A reply is returned even when the retries are
            exhausted.

        Raises:
            TemplateExpansionError: If the path template cannot be
                expanded.
            QueryEncodingError: If the query parameters cannot be encoded.
            BodyEncodingError: If the body cannot be encoded.
            TransportError: If the last attempt failed at the transport
                level.
        """
        client = client or self.client
        owns_client = client is None
        client = client or httpx.Client(timeout=DEFAULT_TIMEOUT)
        try:
            return RetryExecutor(self.policy, self.callbacks).execute(self.spec, client)
        finally:
            if owns_client:
                client.close()

    async def arequest(self, client: httpx.AsyncClient | None = None) -> Reply:
        """Send the request asynchronously, retrying it according to the
        policy.

        Args:
            client: Optional client overriding the configured one. If no
                client is available, one is created with
                ``DEFAULT_TIMEOUT`` and closed afterwards.

        Returns:
            The reply.

        Raises:
            TemplateExpansionError: If the path template cannot be
                expanded.
            QueryEncodingError: If the query parameters cannot be encoded.
            BodyEncodingError: If the body cannot be encoded.
            TransportError: If the last attempt failed at the transport
                level.
        """
        client = client or self.async_client
        owns_client = client is None
        client = client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)
        try:
            return await AsyncRetryExecutor(self.policy, self.callbacks).execute(
                self.spec, client
            )
        finally:
            if owns_client:
                await client.aclose()

    def _with_spec(self, **overrides: Any) -> Cast:
        return replace(self, spec=self.spec.merge(**overrides))

    def _with_policy(self, **overrides: Any) -> Cast:
        return replace(self, policy=replace(self.policy, **overrides))
