r"""Structured query parameter encoding.

Query parameters can be given as a mapping or as a dataclass instance.
Dataclass fields are renamed or skipped with a ``query`` entry in the
field metadata, using the ``"name,omitempty"`` convention:

```python
@dataclass
class Search:
    text: str = field(metadata={"query": "q"})
    page: int = field(default=0, metadata={"query": "page,omitempty"})
    debug: bool = field(default=False, metadata={"query": "-"})
```

Nested mappings and dataclasses are flattened as ``parent[child]``.
"""

from __future__ import annotations

__all__ = ["encode_query", "merge_query"]

import dataclasses
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from recast.exceptions import QueryEncodingError

QUERY_METADATA_KEY = "query"


def encode_query(value: Any) -> dict[str, list[str]]:
    r"""Encode a structured value into query parameters.

    Args:
        value: A mapping, a dataclass instance, or ``None``.

    Returns:
        The query parameters, mapping each name to its values.

    Raises:
        QueryEncodingError: If the value or one of its fields cannot be
            encoded.

    Example:
        ```pycon
        >>> from recast.request.query import encode_query
        >>> encode_query({"tags": ["a", "b"], "limit": 10, "deleted": False})
        {'tags': ['a', 'b'], 'limit': ['10'], 'deleted': ['false']}

        ```
    """
    params: dict[str, list[str]] = {}
    if value is None:
        return params
    if isinstance(value, Mapping):
        for key, item in value.items():
            _encode_value(str(key), item, params, omitempty=False)
        return params
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for name, item, omitempty in _dataclass_fields(value):
            _encode_value(name, item, params, omitempty=omitempty)
        return params
    msg = (
        "query parameters must be a mapping or a dataclass instance, "
        f"got {type(value).__name__}"
    )
    raise QueryEncodingError(msg)


def merge_query(url: str, params: Mapping[str, list[str]]) -> str:
    r"""Merge query parameters into the query string of a URL.

    The existing query string is parsed, the new parameters are added
    after the existing values, and the result is re-encoded sorted by key.
    The order of the values of one key is kept.

    Args:
        url: The URL, possibly with a query string.
        params: The query parameters to add.

    Returns:
        The URL with the canonical merged query string.

    Raises:
        QueryEncodingError: If a key or value cannot be encoded as UTF-8.

    Example:
        ```pycon
        >>> from recast.request.query import merge_query
        >>> merge_query("https://api.example.com/items?b=2&a=1", {"a": ["3"]})
        'https://api.example.com/items?a=1&a=3&b=2'

        ```
    """
    parts = urlsplit(url)
    merged: dict[str, list[str]] = {}
    for key, item in parse_qsl(parts.query, keep_blank_values=True):
        merged.setdefault(key, []).append(item)
    for key, items in params.items():
        merged.setdefault(key, []).extend(items)
    try:
        query = urlencode([(key, item) for key in sorted(merged) for item in merged[key]])
    except UnicodeEncodeError as exc:
        msg = f"query string of {url!r} is not valid UTF-8 text: {exc}"
        raise QueryEncodingError(msg) from exc
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _dataclass_fields(value: Any) -> list[tuple[str, Any, bool]]:
    fields = []
    for field in dataclasses.fields(value):
        tag = field.metadata.get(QUERY_METADATA_KEY, "")
        if tag == "-":
            continue
        name, _, options = tag.partition(",")
        omitempty = "omitempty" in options.split(",")
        fields.append((name or field.name, getattr(value, field.name), omitempty))
    return fields


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    if isinstance(value, (bool, int, float, Decimal)):
        return not value
    return False


def _encode_value(name: str, value: Any, params: dict[str, list[str]], omitempty: bool) -> None:
    if value is None or (omitempty and _is_empty(value)):
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _encode_value(f"{name}[{key}]", item, params, omitempty=False)
        return
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for key, item, item_omitempty in _dataclass_fields(value):
            _encode_value(f"{name}[{key}]", item, params, omitempty=item_omitempty)
        return
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        params.setdefault(name, []).extend(_encode_scalar(name, item) for item in items)
        return
    params.setdefault(name, []).append(_encode_scalar(name, value))


def _encode_scalar(name: str, value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            msg = f"query parameter {name!r} is not valid UTF-8 text: {exc}"
            raise QueryEncodingError(msg) from exc
        return str(value)
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"query parameter {name!r} is not valid UTF-8: {exc}"
            raise QueryEncodingError(msg) from exc
    msg = f"query parameter {name!r} has unsupported type {type(value).__name__}"
    raise QueryEncodingError(msg)
