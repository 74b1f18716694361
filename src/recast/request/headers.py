r"""Header merging.

Headers are kept as an ordered tuple of ``(name, value)`` pairs so the
same name may appear several times. Names are compared case-insensitively.
"""

from __future__ import annotations

__all__ = ["HeaderMergeMode", "HeadersLike", "merge_headers", "normalize_headers"]

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Union

import httpx

HeadersLike = Union[
    httpx.Headers,
    Mapping[str, Union[str, Sequence[str]]],
    Iterable[tuple[str, str]],
]


class HeaderMergeMode(str, Enum):
    r"""How new headers are merged into existing ones.

    - ``APPEND``: keep the existing values and add the new ones.
    - ``REPLACE``: drop the existing values of every name being set, then
      add the new ones.
    """

    APPEND = "append"
    REPLACE = "replace"


def normalize_headers(headers: HeadersLike | None) -> tuple[tuple[str, str], ...]:
    r"""Convert headers into an ordered tuple of pairs.

    Args:
        headers: An ``httpx.Headers``, a mapping whose values are strings
            or sequences of strings, or an iterable of pairs.

    Returns:
        The headers as ``(name, value)`` pairs.

    Example:
        ```pycon
        >>> from recast.request.headers import normalize_headers
        >>> normalize_headers({"Accept": ["text/html", "application/json"]})
        (('Accept', 'text/html'), ('Accept', 'application/json'))

        ```
    """
    if headers is None:
        return ()
    if isinstance(headers, httpx.Headers):
        return tuple(headers.multi_items())
    if isinstance(headers, Mapping):
        pairs = []
        for name, value in headers.items():
            values = [value] if isinstance(value, str) else value
            pairs.extend((str(name), str(item)) for item in values)
        return tuple(pairs)
    return tuple((str(name), str(value)) for name, value in headers)


def merge_headers(
    base: HeadersLike | None,
    extra: HeadersLike | None,
    mode: HeaderMergeMode | str = HeaderMergeMode.APPEND,
) -> tuple[tuple[str, str], ...]:
    r"""Merge ``extra`` headers into ``base`` headers.

    Args:
        base: The existing headers.
        extra: The headers to merge.
        mode: ``"append"`` to keep existing values, ``"replace"`` to
            overwrite the values of the names present in ``extra``.

    Returns:
        The merged headers as ``(name, value)`` pairs.

    Raises:
        ValueError: If ``mode`` is not a valid merge mode.

    Example:
        ```pycon
        >>> from recast.request.headers import merge_headers
        >>> base = {"X-Tag": "a"}
        >>> merge_headers(base, {"x-tag": "b"}, "append")
        (('X-Tag', 'a'), ('x-tag', 'b'))
        >>> merge_headers(base, {"x-tag": "b"}, "replace")
        (('x-tag', 'b'),)

        ```
    """
    mode = HeaderMergeMode(mode)
    base_pairs = normalize_headers(base)
    extra_pairs = normalize_headers(extra)
    if mode is HeaderMergeMode.REPLACE:
        replaced = {name.lower() for name, _ in extra_pairs}
        base_pairs = tuple(pair for pair in base_pairs if pair[0].lower() not in replaced)
    return base_pairs + extra_pairs
