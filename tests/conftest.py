from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Generator, Iterator


class StreamCounter:
    """Count the response streams opened and closed by a mock transport.

    ``stream()`` and ``astream()`` return a byte stream that records
    when it is closed. ``fail`` makes the stream raise ``httpx.ReadError``
    while the body is read.
    """

    def __init__(self) -> None:
        self.opened = 0
        self.closed = 0

    def stream(self, content: bytes = b"", fail: bool = False) -> httpx.SyncByteStream:
        self.opened += 1
        counter = self

        class CountingStream(httpx.SyncByteStream):
            def __iter__(self) -> Iterator[bytes]:
                if fail:
                    msg = "connection reset while reading body"
                    raise httpx.ReadError(msg)
                yield content

            def close(self) -> None:
                counter.closed += 1

        return CountingStream()

    def astream(self, content: bytes = b"", fail: bool = False) -> httpx.AsyncByteStream:
        self.opened += 1
        counter = self

        class AsyncCountingStream(httpx.AsyncByteStream):
            async def __aiter__(self) -> AsyncIterator[bytes]:
                if fail:
                    msg = "connection reset while reading body"
                    raise httpx.ReadError(msg)
                yield content

            async def aclose(self) -> None:
                counter.closed += 1

        return AsyncCountingStream()


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def stream_counter() -> StreamCounter:
    """Create a counter of opened and closed response streams."""
    return StreamCounter()


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks.

    Returns:
        A Mock object that can be used as a callback function.

    Example:
        >>> def test_callback(mock_callback):
        ...     some_function(on_request=mock_callback)
        ...     mock_callback.assert_called_once()
    """
    return Mock()
