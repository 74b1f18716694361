r"""Asynchronous retry executor for HTTP requests.

This module provides the AsyncRetryExecutor class, the asynchronous
counterpart of ``RetryExecutor`` built on ``httpx.AsyncClient``.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import httpx

from recast.retry.config import CallbackConfig
from recast.retry.decider import RetryDecider
from recast.retry.executor_core import build_reply, create_transport_error, prepare_request
from recast.retry.manager import CallbackManager

if TYPE_CHECKING:
    from recast.core.config import RetryPolicy
    from recast.reply import Reply
    from recast.request.spec import RequestSpec

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    r"""Executes HTTP requests asynchronously with automatic retry logic.

    The retry loop is the same as ``RetryExecutor``. When the policy has
    a timeout, sending the request and reading its body are additionally
    bounded by ``asyncio.wait_for``, with a fresh deadline for every
    attempt. An attempt that runs past its deadline is cancelled and
    retried like any other timeout.

    Args:
        policy: The retry policy.
        callbacks: Optional lifecycle callbacks.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from recast.core import RetryPolicy
        >>> from recast.request import RequestSpec
        >>> from recast.retry import AsyncRetryExecutor
        >>> async def example():
        ...     executor = AsyncRetryExecutor(RetryPolicy(max_retries=2, timeout=5.0))
        ...     spec = RequestSpec(method="GET", base_url="https://api.example.com")
        ...     async with httpx.AsyncClient() as client:
        ...         return await executor.execute(spec, client)
        ...
        >>> reply = asyncio.run(example())  # doctest: +SKIP

        ```
    """

    def __init__(self, policy: RetryPolicy, callbacks: CallbackConfig | None = None) -> None:
        self.policy = policy
        self.decider = RetryDecider(policy.hooks)
        self.callbacks = CallbackManager(callbacks or CallbackConfig())

    async def execute(self, spec: RequestSpec, client: httpx.AsyncClient) -> Reply:
        """Execute a request asynchronously with automatic retry logic.

        Args:
            spec: The request description.
            client: The client used to send every attempt.

        Returns:
            The reply built from the accepted response, or from the last
            response when the retries are exhausted.

        Raises:
            TemplateExpansionError: If the path template cannot be
                expanded. Nothing is sent.
            QueryEncodingError: If the query parameters cannot be encoded.
                Nothing is sent.
            BodyEncodingError: If the body cannot be encoded. Nothing is
                sent.
            TransportError: If the last attempt failed at the transport
                level, or on a transport error that cannot be retried.
        """
        max_retries = self.policy.max_retries
        strategy = self.policy.backoff_strategy.fresh()
        start_time = time.time()
        retries = 0

        while True:
            attempt = retries + 1
            request = prepare_request(spec, client, self.policy.timeout, attempt)
            url, method = str(request.url), request.method
            self.callbacks.on_request(url, method, attempt, max_retries)

            response: httpx.Response | None = None
            error: Exception | None = None
            try:
                response = await self._send_with_deadline(client, request)
            except httpx.RequestError as exc:
                reason = self.decider.should_retry_exception(exc)
                if reason is None:
                    self._fail(exc, url, method, attempt, start_time)
                logger.debug(
                    f"{method} request to {url} encountered {type(exc).__name__} on attempt "
                    f"{attempt}/{max_retries + 1}: {exc}"
                )
                error = exc
            else:
                try:
                    reason = self.decider.should_retry_response(response)
                except BaseException:
                    await response.aclose()
                    raise

            if reason is None or retries >= max_retries:
                if response is None:
                    self._fail(error, url, method, attempt, start_time)
                await response.aclose()
                reply = build_reply(response, start_time, attempt, exhausted=reason is not None)
                self.callbacks.on_reply(reply, exhausted=reason is not None)
                return reply

            status_code = None
            if response is not None:
                status_code = response.status_code
                await response.aclose()

            retries += 1
            sleep_time = strategy.calculate(retries)
            logger.debug(
                f"{method} request to {url} will be retried ({reason}), "
                f"waiting {sleep_time:.2f}s before attempt {retries + 1}/{max_retries + 1}"
            )
            self.callbacks.on_retry(
                url, method, retries, max_retries, sleep_time, reason, error, status_code
            )
            await asyncio.sleep(sleep_time)

    async def _send_with_deadline(
        self, client: httpx.AsyncClient, request: httpx.Request
    ) -> httpx.Response:
        timeout = self.policy.timeout
        if timeout is None:
            return await self._send(client, request)
        try:
            return await asyncio.wait_for(self._send(client, request), timeout)
        except asyncio.TimeoutError as exc:
            msg = f"attempt exceeded its {timeout}s deadline"
            raise httpx.TimeoutException(msg, request=request) from exc

    @staticmethod
    async def _send(client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        response = await client.send(request, stream=True)
        try:
            await response.aread()
        except BaseException:
            await response.aclose()
            raise
        return response

    def _fail(self, exc: Exception, url: str, method: str, attempts: int, start_time: float) -> None:
        error = create_transport_error(exc, url=url, method=method, attempts=attempts)
        logger.debug(f"{error}")
        self.callbacks.on_failure(error, self.policy.max_retries, start_time)
        raise error from exc
