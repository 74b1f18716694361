r"""Unit tests for structured logging utilities."""

from __future__ import annotations

import json
import logging
from io import StringIO
from typing import TYPE_CHECKING

import pytest

from recast.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def stream() -> Generator[StringIO, None, None]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("recast.tests.structured")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield stream
    logger.removeHandler(handler)
    clear_correlation_id()


####################################
#     Tests for correlation id     #
####################################


def test_correlation_id_default() -> None:
    assert get_correlation_id() is None


def test_set_and_clear_correlation_id() -> None:
    set_correlation_id("req-123")
    try:
        assert get_correlation_id() == "req-123"
    finally:
        clear_correlation_id()
    assert get_correlation_id() is None


#########################################
#     Tests for StructuredFormatter     #
#########################################


def test_structured_formatter_fields(stream: StringIO) -> None:
    logging.getLogger("recast.tests.structured").info("hello %s", "world")
    data = json.loads(stream.getvalue())
    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert data["logger"] == "recast.tests.structured"
    assert data["function"] == "test_structured_formatter_fields"
    assert data["timestamp"].endswith("Z")
    assert "correlation_id" not in data


def test_structured_formatter_extra_fields(stream: StringIO) -> None:
    logging.getLogger("recast.tests.structured").info(
        "done", extra={"attempts": 2, "url": "https://h"}
    )
    data = json.loads(stream.getvalue())
    assert data["attempts"] == 2
    assert data["url"] == "https://h"


def test_structured_formatter_correlation_id(stream: StringIO) -> None:
    set_correlation_id("order-1")
    logging.getLogger("recast.tests.structured").info("tagged")
    assert json.loads(stream.getvalue())["correlation_id"] == "order-1"


def test_structured_formatter_non_serializable_value(stream: StringIO) -> None:
    logging.getLogger("recast.tests.structured").info("obj", extra={"value": {1, 2}})
    assert json.loads(stream.getvalue())["value"] in ("{1, 2}", "{2, 1}")


def test_structured_formatter_exception(stream: StringIO) -> None:
    logger = logging.getLogger("recast.tests.structured")
    try:
        msg = "boom"
        raise RuntimeError(msg)
    except RuntimeError:
        logger.exception("failed")
    assert "RuntimeError: boom" in json.loads(stream.getvalue())["exception"]


####################################
#     Tests for log_structured     #
####################################


def test_log_structured(stream: StringIO) -> None:
    log_structured(
        logging.getLogger("recast.tests.structured"),
        logging.DEBUG,
        "GET https://h took 0.100s",
        status_code=200,
        cost=0.1,
    )
    data = json.loads(stream.getvalue())
    assert data["level"] == "DEBUG"
    assert data["status_code"] == 200
    assert data["cost"] == 0.1
