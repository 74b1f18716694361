r"""Immutable result of a request execution."""

from __future__ import annotations

__all__ = ["Reply"]

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from recast.utils.decoding import decode_json, decode_xml

if TYPE_CHECKING:
    from collections.abc import Callable
    from xml.etree.ElementTree import Element


@dataclass(frozen=True)
class Reply:
    r"""Result of a request execution.

    A reply is created by the retry executors after the final attempt,
    either accepted or exhausted. The body is fully read and the
    underlying connection already released.

    Args:
        status_code: The HTTP status code of the final response.
        body: The body of the final response.
        cost: The elapsed time in seconds, from the first attempt to the
            end of the final one, backoff waits included.
        attempts: The number of times the request was sent.
        headers: The headers of the final response as ``(name, value)``
            pairs.
        url: The URL of the final request.
        method: The HTTP method of the final request.

    Example:
        ```pycon
        >>> from recast import Reply
        >>> reply = Reply(status_code=200, body=b'{"code": 0}', cost=0.12, attempts=2)
        >>> reply.success
        True
        >>> reply.json()
        {'code': 0}

        ```
    """

    status_code: int
    body: bytes
    cost: float
    attempts: int
    headers: tuple[tuple[str, str], ...] = ()
    url: str = ""
    method: str = ""
    encoding: str | None = field(default=None, repr=False)

    @classmethod
    def from_response(cls, response: httpx.Response, cost: float, attempts: int) -> Reply:
        """Create a reply from a response whose body was read.

        Args:
            response: The final response. Its body must have been read.
            cost: The elapsed time in seconds.
            attempts: The number of times the request was sent.

        Returns:
            The reply.
        """
        return cls(
            status_code=response.status_code,
            body=response.content,
            cost=cost,
            attempts=attempts,
            headers=tuple(response.headers.multi_items()),
            url=str(response.request.url),
            method=response.request.method,
            encoding=response.encoding,
        )

    @property
    def ok(self) -> bool:
        """``True`` if the status code is 200."""
        return self.status_code == 200

    @property
    def success(self) -> bool:
        """``True`` if the status code is in the 2xx range."""
        return 200 <= self.status_code <= 299

    @property
    def size(self) -> int:
        """The length of the body in bytes."""
        return len(self.body)

    @property
    def text(self) -> str:
        """The body decoded as text."""
        return self.body.decode(self.encoding or "utf-8", errors="replace")

    @property
    def cookies(self) -> httpx.Cookies:
        """The cookies set by the ``Set-Cookie`` headers of the final
        response.

        Example:
            ```pycon
            >>> from recast import Reply
            >>> reply = Reply(
            ...     status_code=200,
            ...     body=b"",
            ...     cost=0.1,
            ...     attempts=1,
            ...     headers=(("set-cookie", "session=abc; Path=/"),),
            ...     url="https://api.example.com/login",
            ...     method="POST",
            ... )
            >>> reply.cookies["session"]
            'abc'

            ```
        """
        cookies = httpx.Cookies()
        if self.url:
            request = httpx.Request(self.method or "GET", self.url)
            cookies.extract_cookies(
                httpx.Response(self.status_code, headers=list(self.headers), request=request)
            )
        return cookies

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the values of a header joined by commas.

        Args:
            name: The header name (case-insensitive).
            default: The value returned when the header is missing.

        Returns:
            The header value, or ``default``.
        """
        return httpx.Headers(list(self.headers)).get(name, default)

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            DecodeError: If the body is not valid JSON.
        """
        return decode_json(self.body)

    def decode_json(self, into: Callable[..., Any]) -> Any:
        """Decode the body as JSON into a type.

        Args:
            into: The type or factory receiving the decoded value.

        Raises:
            DecodeError: If the body is not valid JSON or cannot be
                converted.
        """
        return decode_json(self.body, into=into)

    def decode_xml(self) -> Element | None:
        """Decode the body as XML and return the root element.

        Raises:
            DecodeError: If the body is not well-formed XML.
        """
        return decode_xml(self.body)
