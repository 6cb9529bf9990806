"""BaseStreamingAdapter lifecycle: OPEN -> CHUNK* -> END | ERROR."""

from __future__ import annotations

from typing import Any, AsyncIterator, List, Optional

import pytest

from lumen_providers.base.cancellation import CancellationToken
from lumen_providers.base.errors import ErrorCode, ProtocolError
from lumen_providers.base.logging import LogContext, get_logger
from lumen_providers.base.streaming import BaseStreamingAdapter, StreamChunk, StreamEnd, StreamError


class _Native:
    """Async generator wrapper recording whether it was closed."""

    def __init__(self, items: List[Any], error: Optional[BaseException] = None) -> None:
        self.items = items
        self.error = error
        self.closed = False

    async def _gen(self) -> AsyncIterator[Any]:
        try:
            for item in self.items:
                yield item
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


def _adapter(native: Optional[_Native] = None, *, start_error: Optional[BaseException] = None, token=None):
    async def starter():
        if start_error is not None:
            raise start_error
        return native._gen()

    return BaseStreamingAdapter(
        ctx=LogContext(provider="fake", model="m"),
        provider_name="fake",
        model="m",
        starter=starter,
        translator=lambda item: item,
        logger=get_logger("tests.stream"),
        cancellation_token=token,
    )


async def _collect(adapter: BaseStreamingAdapter) -> list:
    return [ev async for ev in adapter.run()]


@pytest.mark.asyncio
async def test_chunks_then_single_end(log_events):
    native = _Native(["a", None, "", "b", "c"])
    adapter = _adapter(native)
    events = await _collect(adapter)
    assert events == [StreamChunk("a"), StreamChunk("b"), StreamChunk("c"), StreamEnd("abc")]  # nosec B101
    assert native.closed is True  # nosec B101
    assert adapter.metrics.emitted == 3  # nosec B101
    end = [e for e in log_events if e["event"] == "stream.adapter.end"]
    assert len(end) == 1 and end[0]["emitted_count"] == 3  # nosec B101


@pytest.mark.asyncio
async def test_empty_stream_ends_with_empty_text():
    assert await _collect(_adapter(_Native([]))) == [StreamEnd("")]  # nosec B101


@pytest.mark.asyncio
async def test_start_failure_is_single_error_event(log_events):
    events = await _collect(_adapter(start_error=ConnectionRefusedError("connection refused")))
    assert len(events) == 1 and isinstance(events[0], StreamError)  # nosec B101
    assert events[0].cause.code is ErrorCode.UNAVAILABLE  # nosec B101
    assert any(e["event"] == "stream.adapter.error" for e in log_events)  # nosec B101


@pytest.mark.asyncio
async def test_mid_stream_failure_keeps_delivered_chunks():
    native = _Native(["x"], error=ProtocolError("bad frame", "fake", "m"))
    events = await _collect(_adapter(native))
    assert events[0] == StreamChunk("x")  # nosec B101
    assert isinstance(events[1], StreamError) and events[1].cause.message == "bad frame"  # nosec B101
    assert len(events) == 2 and native.closed  # nosec B101


@pytest.mark.asyncio
async def test_cancelled_token_stops_without_terminal_event():
    token = CancellationToken()
    native = _Native(["1", "2", "3"])
    adapter = _adapter(native, token=token)
    events = []
    async for ev in adapter.run():
        events.append(ev)
        token.cancel("stop")
    assert events == [StreamChunk("1")]  # nosec B101
    assert native.closed is True  # nosec B101
