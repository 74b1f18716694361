r"""Unit tests for the Cast builder."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from recast import (
    Cast,
    ConstantBackoff,
    DecorrelatedJitterBackoff,
    EqualJitterBackoff,
    ExponentialBackoff,
    FullJitterBackoff,
    LinearBackoff,
    RetryOnServerError,
    RetryOnStatus,
    TemplateExpansionError,
    TransportError,
)
from recast.hooks import CallableRetryHook
from recast.request import BasicAuth, FormBody, JsonBody, PlainBody, XmlBody
from recast.retry import CallbackConfig

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://api.example.com"


@dataclass
class Search:
    text: str = field(metadata={"query": "q"})
    page: int = field(default=0, metadata={"query": "page,omitempty"})


def make_transport(
    statuses: list[int], requests: list[httpx.Request]
) -> Callable[[httpx.Request], httpx.Response]:
    responses = iter(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(next(responses), json={"path": request.url.path})

    return handler


#####################################
#     Tests for builder options     #
#####################################


def test_cast_defaults() -> None:
    cast = Cast()
    assert cast.spec.method == "GET"
    assert cast.policy.max_retries == 0
    assert cast.callbacks == CallbackConfig()
    assert cast.client is None
    assert cast.async_client is None


def test_cast_is_immutable() -> None:
    cast = Cast()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cast.spec = None  # type: ignore[assignment,misc]


def test_cast_with_methods_return_new_builders() -> None:
    base = Cast().with_base_url(BASE_URL)
    users = base.with_api("/users/{id}").with_path_params({"id": 42}).with_method("delete")
    assert base.spec.path_template == ""
    assert dict(base.spec.path_params) == {}
    assert base.spec.method == "GET"
    assert users.spec.base_url == BASE_URL
    assert users.spec.path_template == "/users/{id}"
    assert dict(users.spec.path_params) == {"id": 42}
    assert users.spec.method == "DELETE"


def test_cast_append_headers() -> None:
    cast = Cast().append_headers({"X-Tag": "a"}).append_headers({"x-tag": "b"})
    assert cast.spec.headers == (("X-Tag", "a"), ("x-tag", "b"))


def test_cast_set_headers() -> None:
    cast = Cast().append_headers({"X-Tag": ["a", "b"], "Accept": "text/html"})
    cast = cast.set_headers({"x-tag": "c"})
    assert cast.spec.headers == (("Accept", "text/html"), ("x-tag", "c"))


def test_cast_with_query_params() -> None:
    params = Search(text="ada")
    assert Cast().with_query_params(params).spec.query_params is params


@pytest.mark.parametrize(
    ("method", "payload", "body"),
    [
        ("with_json_body", {"a": 1}, JsonBody({"a": 1})),
        ("with_xml_body", "<a/>", XmlBody("<a/>")),
        ("with_plain_body", "hi", PlainBody("hi")),
        ("with_form_body", {"a": 1}, FormBody({"a": 1})),
    ],
)
def test_cast_bodies(method: str, payload: object, body: object) -> None:
    assert getattr(Cast(), method)(payload).spec.body == body


def test_cast_with_query_params_mapping_is_snapshot() -> None:
    params = {"q": "ada"}
    cast = Cast().with_query_params(params)
    params["q"] = "grace"
    assert cast.with_method("POST").spec.query_params == {"q": "ada"}


def test_cast_last_body_wins() -> None:
    cast = Cast().with_json_body({"a": 1}).with_plain_body("hi")
    assert cast.spec.body == PlainBody("hi")


def test_cast_with_basic_auth() -> None:
    assert Cast().with_basic_auth("ada", "secret").spec.auth == BasicAuth("ada", "secret")


def test_cast_with_retry() -> None:
    cast = Cast().with_retry(3)
    assert cast.policy.max_retries == 3
    assert Cast().policy.max_retries == 0


def test_cast_with_retry_negative() -> None:
    with pytest.raises(ValueError, match=r"max_retries must be >= 0"):
        Cast().with_retry(-1)


@pytest.mark.parametrize(
    ("method", "args", "strategy_cls"),
    [
        ("with_constant_backoff", (1.0,), ConstantBackoff),
        ("with_linear_backoff", (1.0, 5.0), LinearBackoff),
        ("with_exponential_backoff", (0.5, 5.0), ExponentialBackoff),
        ("with_exponential_equal_jitter_backoff", (0.5, 5.0), EqualJitterBackoff),
        ("with_exponential_full_jitter_backoff", (0.5, 5.0), FullJitterBackoff),
        ("with_exponential_decorrelated_jitter_backoff", (0.5, 5.0), DecorrelatedJitterBackoff),
    ],
)
def test_cast_backoff_strategies(method: str, args: tuple[float, ...], strategy_cls: type) -> None:
    assert type(getattr(Cast(), method)(*args).policy.backoff_strategy) is strategy_cls


def test_cast_exponential_backoff_parameters() -> None:
    strategy = Cast().with_exponential_backoff(0.5, max_delay=4.0).policy.backoff_strategy
    assert strategy.base_delay == 0.5
    assert strategy.max_delay == 4.0


def test_cast_with_backoff() -> None:
    strategy = ConstantBackoff(2.0)
    assert Cast().with_backoff(strategy).policy.backoff_strategy is strategy


def test_cast_add_retry_hooks_appends() -> None:
    first, second = RetryOnStatus(429), RetryOnServerError()

    def third(response: httpx.Response) -> str | None:
        return None

    cast = Cast().add_retry_hooks(first).add_retry_hooks(second, third)
    assert cast.policy.hooks[:2] == (first, second)
    assert isinstance(cast.policy.hooks[2], CallableRetryHook)


def test_cast_with_timeout() -> None:
    assert Cast().with_timeout(2.5).policy.timeout == 2.5


def test_cast_with_timeout_invalid() -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        Cast().with_timeout(0)


def test_cast_with_callbacks(mock_callback: Mock) -> None:
    callbacks = CallbackConfig(on_retry=mock_callback)
    assert Cast().with_callbacks(callbacks).callbacks is callbacks


def test_cast_with_clients() -> None:
    client = httpx.Client()
    async_client = httpx.AsyncClient()
    cast = Cast().with_client(client).with_async_client(async_client)
    assert cast.client is client
    assert cast.async_client is async_client
    client.close()


###############################
#     Tests for request()     #
###############################


def test_cast_request(mock_sleep: Mock) -> None:
    requests: list[httpx.Request] = []
    client = httpx.Client(transport=httpx.MockTransport(make_transport([503, 200], requests)))
    cast = (
        Cast()
        .with_base_url(BASE_URL)
        .with_api("/users/{id}")
        .with_path_params({"id": 42})
        .with_query_params(Search(text="ada lovelace"))
        .with_method("POST")
        .with_json_body({"name": "ada"})
        .with_basic_auth("ada", "secret")
        .append_headers({"X-Request-Id": "1"})
        .with_retry(2)
        .with_constant_backoff(0.1)
        .add_retry_hooks(RetryOnStatus(503))
        .with_client(client)
    )
    with client:
        reply = cast.request()

    assert reply.status_code == 200
    assert reply.attempts == 2
    assert reply.json() == {"path": "/users/42"}
    request = requests[-1]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/users/42?q=ada+lovelace"
    assert request.headers["Authorization"] == "Basic YWRhOnNlY3JldA=="
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["X-Request-Id"] == "1"
    assert request.content == b'{"name":"ada"}'
    mock_sleep.assert_called_once_with(0.1)


def test_cast_request_client_argument_overrides_configured() -> None:
    requests: list[httpx.Request] = []
    configured = Mock(spec=httpx.Client)
    client = httpx.Client(transport=httpx.MockTransport(make_transport([200], requests)))
    with client:
        Cast().with_base_url(BASE_URL).with_client(configured).request(client)
    assert len(requests) == 1
    configured.send.assert_not_called()


def test_cast_request_does_not_close_injected_client() -> None:
    requests: list[httpx.Request] = []
    with httpx.Client(transport=httpx.MockTransport(make_transport([200], requests))) as client:
        Cast().with_base_url(BASE_URL).request(client)
        assert not client.is_closed


def test_cast_request_creates_and_closes_default_client() -> None:
    requests: list[httpx.Request] = []
    client = httpx.Client(transport=httpx.MockTransport(make_transport([200], requests)))
    with patch("recast.builder.httpx.Client", return_value=client) as client_cls:
        reply = Cast().with_base_url(BASE_URL).request()

    assert reply.status_code == 200
    client_cls.assert_called_once_with(timeout=10.0)
    assert client.is_closed


def test_cast_request_template_error_sends_nothing() -> None:
    requests: list[httpx.Request] = []
    with httpx.Client(transport=httpx.MockTransport(make_transport([200], requests))) as client:
        with pytest.raises(TemplateExpansionError):
            Cast().with_base_url(BASE_URL).with_api("/users/{id}").with_retry(3).request(client)
    assert requests == []


def test_cast_request_transport_error(mock_sleep: Mock) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        msg = "refused"
        raise httpx.ConnectError(msg, request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TransportError) as exc:
            Cast().with_base_url(BASE_URL).with_retry(1).request(client)
    assert exc.value.attempts == 2


def test_cast_shared_builder_runs_independent_requests(mock_sleep: Mock) -> None:
    requests: list[httpx.Request] = []
    client = httpx.Client(
        transport=httpx.MockTransport(make_transport([500, 200, 500, 200], requests))
    )
    cast = (
        Cast()
        .with_base_url(BASE_URL)
        .with_retry(2)
        .with_exponential_decorrelated_jitter_backoff(0.1, 1.0)
        .add_retry_hooks(RetryOnServerError())
    )
    with client:
        first = cast.request(client)
        second = cast.request(client)
    assert first.attempts == second.attempts == 2
    assert cast.policy.backoff_strategy.previous_delay == 0.1
