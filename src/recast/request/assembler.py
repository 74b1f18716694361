r"""Request assembly.

The assembler turns a ``RequestSpec`` into a transport-ready
``httpx.Request``. It is called once per attempt and always builds a new
request from it, so every attempt sends the same method, URL,
headers and body bytes and never reuses a consumed body stream.
"""

from __future__ import annotations

__all__ = ["assemble", "build_url"]

import logging
from typing import TYPE_CHECKING

import httpx

from recast.request.headers import HeaderMergeMode, merge_headers
from recast.request.query import encode_query, merge_query
from recast.request.template import expand_template

if TYPE_CHECKING:
    from recast.request.spec import RequestSpec

logger: logging.Logger = logging.getLogger(__name__)

CONTENT_TYPE = "Content-Type"
AUTHORIZATION = "Authorization"


def build_url(spec: RequestSpec) -> str:
    r"""Build the final URL of a request.

    Args:
        spec: The request description.

    Returns:
        The URL with the expanded path and the canonical query string.

    Raises:
        TemplateExpansionError: If the path template cannot be expanded.
        QueryEncodingError: If the query parameters cannot be encoded.

    Example:
        ```pycon
        >>> from recast.request.assembler import build_url
        >>> from recast.request.spec import RequestSpec
        >>> spec = RequestSpec(
        ...     base_url="https://api.example.com",
        ...     path_template="/users/{id}?a=1",
        ...     path_params={"id": 42},
        ...     query_params={"b": 2},
        ... )
        >>> build_url(spec)
        'https://api.example.com/users/42?a=1&b=2'

        ```
    """
    path = expand_template(spec.path_template, spec.path_params)
    return merge_query(spec.base_url + path, encode_query(spec.query_params))


def assemble(
    spec: RequestSpec,
    client: httpx.Client | httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> httpx.Request:
    r"""Assemble a transport request from a request description.

    The steps are: expand the path template, merge the query parameters,
    encode the body, merge the headers (the body content type and the
    basic authentication header replace configured values), and attach the
    per-attempt timeout.

    When a client is given the request is built with
    ``client.build_request`` so the client defaults (base URL, headers,
    cookies, timeout) apply. The configured headers replace client headers
    with the same name.

    Args:
        spec: The request description.
        client: Optional client whose defaults are applied to the request.
        timeout: Optional per-attempt timeout in seconds, attached to the
            request so the transport enforces it for this attempt only.
            Defaults to the client timeout.

    Returns:
        A new ``httpx.Request``.

    Raises:
        TemplateExpansionError: If the path template cannot be expanded.
        QueryEncodingError: If the query parameters cannot be encoded.
        BodyEncodingError: If the body cannot be encoded.
    """
    url = build_url(spec)

    content = None
    headers = spec.headers
    if spec.body is not None:
        content, content_type = spec.body.encode()
        headers = merge_headers(headers, {CONTENT_TYPE: content_type}, HeaderMergeMode.REPLACE)
    if spec.auth is not None:
        headers = merge_headers(
            headers, {AUTHORIZATION: spec.auth.header_value()}, HeaderMergeMode.REPLACE
        )

    if client is None:
        request = httpx.Request(spec.method, url, headers=list(headers), content=content)
        if timeout is not None:
            request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()
    else:
        request = client.build_request(
            spec.method,
            url,
            headers=list(headers),
            content=content,
            timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout,
        )
    logger.debug(f"Assembled {spec.method} request to {url}")
    return request
