r"""Unit tests for structured query parameter encoding."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date

import pytest

from recast.exceptions import QueryEncodingError
from recast.request.query import encode_query, merge_query


class Color(enum.Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class Page:
    number: int = field(default=1, metadata={"query": "page"})
    size: int = field(default=0, metadata={"query": "size,omitempty"})


@dataclass
class Search:
    text: str = field(metadata={"query": "q"})
    page: Page = field(default_factory=Page)
    tags: list[str] = field(default_factory=list)
    debug: bool = field(default=False, metadata={"query": "-"})
    since: date | None = None


##################################
#     Tests for encode_query     #
##################################


def test_encode_query_none() -> None:
    assert encode_query(None) == {}


def test_encode_query_mapping() -> None:
    assert encode_query({"limit": 10, "q": "ada"}) == {"limit": ["10"], "q": ["ada"]}


def test_encode_query_scalars() -> None:
    assert encode_query(
        {
            "flag": True,
            "off": False,
            "ratio": 0.5,
            "day": date(2024, 1, 31),
            "color": Color.BLUE,
            "raw": b"bytes",
        }
    ) == {
        "flag": ["true"],
        "off": ["false"],
        "ratio": ["0.5"],
        "day": ["2024-01-31"],
        "color": ["blue"],
        "raw": ["bytes"],
    }


def test_encode_query_list_repeats_key() -> None:
    assert encode_query({"id": [1, 2, 3]}) == {"id": ["1", "2", "3"]}


def test_encode_query_set_is_sorted() -> None:
    assert encode_query({"id": {"b", "a"}}) == {"id": ["a", "b"]}


def test_encode_query_skips_none() -> None:
    assert encode_query({"a": None, "b": 1}) == {"b": ["1"]}


def test_encode_query_nested_mapping() -> None:
    assert encode_query({"filter": {"name": "ada", "age": 36}}) == {
        "filter[name]": ["ada"],
        "filter[age]": ["36"],
    }


def test_encode_query_dataclass() -> None:
    assert encode_query(Search(text="ada", tags=["x", "y"], debug=True)) == {
        "q": ["ada"],
        "page[page]": ["1"],
        "tags": ["x", "y"],
    }


def test_encode_query_dataclass_omitempty_keeps_non_empty() -> None:
    assert encode_query(Page(number=2, size=50)) == {"page": ["2"], "size": ["50"]}


def test_encode_query_dataclass_nested_date() -> None:
    assert encode_query(Search(text="a", since=date(2024, 5, 1)))["since"] == ["2024-05-01"]


@pytest.mark.parametrize("value", [42, "a=1", ["a", "b"], Page])
def test_encode_query_invalid_value(value: object) -> None:
    with pytest.raises(QueryEncodingError, match=r"must be a mapping or a dataclass instance"):
        encode_query(value)


def test_encode_query_unsupported_field_type() -> None:
    with pytest.raises(QueryEncodingError, match=r"query parameter 'obj' has unsupported type"):
        encode_query({"obj": object()})


def test_encode_query_invalid_bytes() -> None:
    with pytest.raises(QueryEncodingError, match=r"is not valid UTF-8"):
        encode_query({"raw": b"\xff"})


def test_encode_query_lone_surrogate() -> None:
    with pytest.raises(QueryEncodingError, match=r"query parameter 'q' is not valid UTF-8"):
        encode_query({"q": "\ud800"})


#################################
#     Tests for merge_query     #
#################################


def test_merge_query_with_existing_query() -> None:
    assert merge_query("https://h/p?a=1", {"b": ["2"]}) == "https://h/p?a=1&b=2"


def test_merge_query_sorts_keys_and_keeps_value_order() -> None:
    assert merge_query("https://h/p?b=2&a=1", {"a": ["3"]}) == "https://h/p?a=1&a=3&b=2"


def test_merge_query_without_params() -> None:
    assert merge_query("https://h/p", {}) == "https://h/p"


def test_merge_query_keeps_blank_values_and_fragment() -> None:
    assert merge_query("https://h/p?empty=#top", {"x": ["1"]}) == "https://h/p?empty=&x=1#top"


def test_merge_query_encodes_values() -> None:
    assert merge_query("https://h/p", {"q": ["a b&c"]}) == "https://h/p?q=a+b%26c"


def test_merge_query_encodes_nested_keys() -> None:
    assert merge_query("/p", {"filter[name]": ["ada"]}) == "/p?filter%5Bname%5D=ada"


def test_merge_query_lone_surrogate_key() -> None:
    with pytest.raises(QueryEncodingError, match=r"is not valid UTF-8 text"):
        merge_query("https://h/p", {"\ud800": ["x"]})
