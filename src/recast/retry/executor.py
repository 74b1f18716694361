r"""Synchronous retry executor for HTTP requests.

This module provides the RetryExecutor class that sends a request
described by a ``RequestSpec`` through an ``httpx.Client``, retrying it
according to a ``RetryPolicy``.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from recast.retry.config import CallbackConfig
from recast.retry.decider import RetryDecider
from recast.retry.executor_core import build_reply, create_transport_error, prepare_request
from recast.retry.manager import CallbackManager

if TYPE_CHECKING:
    from collections.abc import Iterator

    from recast.core.config import RetryPolicy
    from recast.reply import Reply
    from recast.request.spec import RequestSpec

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    r"""Executes HTTP requests with automatic retry logic.

    Every attempt follows the same steps: assemble a fresh request, send
    it, read the response body, and evaluate the retry hooks. A transport
    error counts as a retry signal. On a retry signal the response is
    closed, the executor waits for the backoff delay and sends the request
    again, at most ``max_retries`` times. When no hook asks for a retry,
    or when the retries are exhausted, the last response is returned as a
    ``Reply``. An execution whose last attempt failed at the transport
    level raises ``TransportError``.

    The executor holds no per-request state, so one executor can run
    requests from several threads sharing a client.

    Args:
        policy: The retry policy.
        callbacks: Optional lifecycle callbacks.

    Example:
        ```pycon
        >>> import httpx
        >>> from recast.core import RetryPolicy
        >>> from recast.hooks import RetryOnStatus
        >>> from recast.request import RequestSpec
        >>> from recast.retry import RetryExecutor
        >>> executor = RetryExecutor(RetryPolicy(max_retries=2, hooks=[RetryOnStatus(503)]))
        >>> spec = RequestSpec(method="GET", base_url="https://api.example.com")
        >>> with httpx.Client() as client:  # doctest: +SKIP
        ...     reply = executor.execute(spec, client)
        ...

        ```
    """

    def __init__(self, policy: RetryPolicy, callbacks: CallbackConfig | None = None) -> None:
        self.policy = policy
        self.decider = RetryDecider(policy.hooks)
        self.callbacks = CallbackManager(callbacks or CallbackConfig())

    def execute(self, spec: RequestSpec, client: httpx.Client) -> Reply:
        """Execute a request with automatic retry logic.

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
                response = self._send(client, request)
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
                    response.close()
                    raise

            if reason is None or retries >= max_retries:
                if response is None:
                    self._fail(error, url, method, attempt, start_time)
                response.close()
                reply = build_reply(response, start_time, attempt, exhausted=reason is not None)
                self.callbacks.on_reply(reply, exhausted=reason is not None)
                return reply

            status_code = None
            if response is not None:
                status_code = response.status_code
                response.close()

            retries += 1
            sleep_time = strategy.calculate(retries)
            logger.debug(
                f"{method} request to {url} will be retried ({reason}), "
                f"waiting {sleep_time:.2f}s before attempt {retries + 1}/{max_retries + 1}"
            )
            self.callbacks.on_retry(
                url, method, retries, max_retries, sleep_time, reason, error, status_code
            )
            time.sleep(sleep_time)

    def _send(self, client: httpx.Client, request: httpx.Request) -> httpx.Response:
        timeout = self.policy.timeout
        deadline = None if timeout is None else time.monotonic() + timeout
        response = client.send(request, stream=True)
        try:
            if deadline is not None:
                response.stream = _DeadlineStream(response.stream, request, deadline, timeout)
            response.read()
        except BaseException:
            response.close()
            raise
        return response

    def _fail(
        self, exc: Exception, url: str, method: str, attempts: int, start_time: float
    ) -> None:
        error = create_transport_error(exc, url=url, method=method, attempts=attempts)
        logger.debug(f"{error}")
        self.callbacks.on_failure(error, self.policy.max_retries, start_time)
        raise error from exc


class _DeadlineStream(httpx.SyncByteStream):
    """Wrap a response stream and raise ``httpx.ReadTimeout`` once the
    attempt deadline has passed.

    The httpx timeouts bound each network operation, so a server sending
    the body slowly can keep an attempt alive well past its timeout.
    """

    def __init__(
        self,
        stream: httpx.SyncByteStream,
        request: httpx.Request,
        deadline: float,
        timeout: float,
    ) -> None:
        self._stream = stream
        self._request = request
        self._deadline = deadline
        self._timeout = timeout

    def __iter__(self) -> Iterator[bytes]:
        for chunk in self._stream:
            if time.monotonic() > self._deadline:
                msg = f"attempt exceeded its {self._timeout}s deadline"
                raise httpx.ReadTimeout(msg, request=self._request)
            yield chunk

    def close(self) -> None:
        self._stream.close()
