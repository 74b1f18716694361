r"""Decoding helpers for reply bodies."""

from __future__ import annotations

__all__ = ["decode_json", "decode_xml"]

import json
from collections.abc import Callable, Mapping
from typing import Any, TypeVar, overload
from xml.etree import ElementTree as ET  # noqa: N817

from recast.exceptions import DecodeError

T = TypeVar("T")


@overload
def decode_json(data: bytes) -> Any: ...


@overload
def decode_json(data: bytes, into: Callable[..., T]) -> T: ...


def decode_json(data: bytes, into: Callable[..., Any] | None = None) -> Any:
    r"""Decode a JSON document.

    Args:
        data: The JSON document.
        into: Optional type or factory. A decoded object is passed as
            keyword arguments (``into(**obj)``), any other value as a
            single argument.

    Returns:
        The decoded value, or ``None`` if ``data`` is empty.

    Raises:
        DecodeError: If the document is not valid JSON or cannot be
            converted with ``into``.

    Example:
        ```pycon
        >>> from dataclasses import dataclass
        >>> from recast.utils.decoding import decode_json
        >>> decode_json(b'{"code": 0, "msg": "ok"}')
        {'code': 0, 'msg': 'ok'}
        >>> @dataclass
        ... class Status:
        ...     code: int
        ...     msg: str
        ...
        >>> decode_json(b'{"code": 0, "msg": "ok"}', into=Status)
        Status(code=0, msg='ok')

        ```
    """
    if not data:
        return None
    try:
        value = json.loads(data)
    except ValueError as exc:
        msg = f"invalid JSON document: {exc}"
        raise DecodeError(msg) from exc
    if into is None:
        return value
    try:
        if isinstance(value, Mapping):
            return into(**value)
        return into(value)
    except (TypeError, ValueError) as exc:
        name = getattr(into, "__name__", repr(into))
        msg = f"cannot convert JSON document into {name}: {exc}"
        raise DecodeError(msg) from exc


def decode_xml(data: bytes) -> ET.Element | None:
    r"""Decode an XML document.

    Args:
        data: The XML document.

    Returns:
        The root element, or ``None`` if ``data`` is empty.

    Raises:
        DecodeError: If the document is not well-formed XML.

    Example:
        ```pycon
        >>> from recast.utils.decoding import decode_xml
        >>> decode_xml(b"<user id='7'><name>ada</name></user>").find("name").text
        'ada'

        ```
    """
    if not data:
        return None
    try:
        return ET.fromstring(data)  # noqa: S314
    except ET.ParseError as exc:
        msg = f"invalid XML document: {exc}"
        raise DecodeError(msg) from exc

