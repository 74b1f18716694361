r"""Request body encodings.

Each body type turns its payload into bytes and a content type. Encoding
happens on every attempt, so a body never holds a consumed stream.
"""

from __future__ import annotations

__all__ = ["FormBody", "JsonBody", "PlainBody", "RequestBody", "XmlBody"]

import dataclasses
import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar
from urllib.parse import urlencode
from xml.etree import ElementTree as ET  # noqa: N817

from recast.exceptions import BodyEncodingError, QueryEncodingError
from recast.request.query import encode_query


class RequestBody(ABC):
    """Abstract base class for request bodies."""

    content_type: ClassVar[str]

    @abstractmethod
    def encode(self) -> tuple[bytes, str]:
        """Serialize the payload.

        Returns:
            A tuple ``(content, content_type)``.

        Raises:
            BodyEncodingError: If the payload cannot be serialized.
        """


@dataclasses.dataclass(frozen=True)
class JsonBody(RequestBody):
    """JSON request body.

    Dataclass instances are converted with ``dataclasses.asdict``.

    Example:
        ```pycon
        >>> from recast.request.body import JsonBody
        >>> JsonBody({"name": "ada", "id": 1}).encode()
        (b'{"name":"ada","id":1}', 'application/json')

        ```
    """

    payload: Any
    content_type: ClassVar[str] = "application/json"

    def encode(self) -> tuple[bytes, str]:
        payload = self.payload
        if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
            payload = dataclasses.asdict(payload)
        try:
            content = json.dumps(
                payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False
            ).encode("utf-8")
        except (TypeError, ValueError) as exc:
            msg = f"cannot encode payload as JSON: {exc}"
            raise BodyEncodingError(self.content_type, msg) from exc
        return content, self.content_type


@dataclasses.dataclass(frozen=True)
class XmlBody(RequestBody):
    r"""XML request body.

    The payload is an ``xml.etree.ElementTree.Element``, an XML string or
    bytes, or a mapping with a single root key. In mappings, keys starting
    with ``@`` are attributes, ``#text`` is the element text and lists
    repeat the element.

    Example:
        ```pycon
        >>> from recast.request.body import XmlBody
        >>> XmlBody({"user": {"@id": 7, "name": "ada"}}).encode()
        (b'<user id="7"><name>ada</name></user>', 'application/xml')

        ```
    """

    payload: Any
    content_type: ClassVar[str] = "application/xml"

    def encode(self) -> tuple[bytes, str]:
        payload = self.payload
        if isinstance(payload, bytes):
            return payload, self.content_type
        if isinstance(payload, str):
            return _encode_utf8(payload, self.content_type), self.content_type
        if isinstance(payload, Mapping):
            payload = self._from_mapping(payload)
        if not isinstance(payload, ET.Element):
            msg = (
                "XML payload must be an Element, a string, bytes or a mapping, "
                f"got {type(payload).__name__}"
            )
            raise BodyEncodingError(self.content_type, msg)
        try:
            content = ET.tostring(payload, encoding="unicode").encode("utf-8")
        except (TypeError, ValueError) as exc:
            msg = f"cannot encode payload as XML: {exc}"
            raise BodyEncodingError(self.content_type, msg) from exc
        return content, self.content_type

    def _from_mapping(self, payload: Mapping[str, Any]) -> ET.Element:
        if len(payload) != 1:
            msg = f"XML mapping payload must have exactly one root key, got {len(payload)}"
            raise BodyEncodingError(self.content_type, msg)
        ((tag, value),) = payload.items()
        if isinstance(value, list):
            msg = f"XML root element {tag!r} cannot be a list"
            raise BodyEncodingError(self.content_type, msg)
        root = ET.Element(str(tag))
        self._fill(root, value)
        return root

    def _fill(self, element: ET.Element, value: Any) -> None:
        if value is None:
            return
        if not isinstance(value, Mapping):
            element.text = _xml_text(value)
            return
        for key, item in value.items():
            key = str(key)
            if key.startswith("@"):
                element.set(key[1:], _xml_text(item))
            elif key == "#text":
                element.text = _xml_text(item)
            else:
                for child_value in item if isinstance(item, list) else [item]:
                    self._fill(ET.SubElement(element, key), child_value)


@dataclasses.dataclass(frozen=True)
class PlainBody(RequestBody):
    """Plain text request body encoded as UTF-8."""

    payload: str
    content_type: ClassVar[str] = "text/plain; charset=utf-8"

    def encode(self) -> tuple[bytes, str]:
        if not isinstance(self.payload, str):
            msg = f"plain text payload must be a string, got {type(self.payload).__name__}"
            raise BodyEncodingError(self.content_type, msg)
        return _encode_utf8(self.payload, self.content_type), self.content_type


@dataclasses.dataclass(frozen=True)
class FormBody(RequestBody):
    """URL-encoded form request body.

    The payload is encoded like query parameters (mapping or dataclass
    instance) and sorted by key.

    Example:
        ```pycon
        >>> from recast.request.body import FormBody
        >>> FormBody({"user": "ada", "tags": ["x", "y"]}).encode()
        (b'tags=x&tags=y&user=ada', 'application/x-www-form-urlencoded')

        ```
    """

    payload: Any
    content_type: ClassVar[str] = "application/x-www-form-urlencoded"

    def encode(self) -> tuple[bytes, str]:
        try:
            params = encode_query(self.payload)
            content = urlencode([(key, item) for key in sorted(params) for item in params[key]])
        except (QueryEncodingError, UnicodeEncodeError) as exc:
            msg = f"cannot encode payload as form data: {exc}"
            raise BodyEncodingError(self.content_type, msg) from exc
        return content.encode("ascii"), self.content_type


def _encode_utf8(text: str, content_type: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        msg = f"payload is not valid UTF-8 text: {exc}"
        raise BodyEncodingError(content_type, msg) from exc


def _xml_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
