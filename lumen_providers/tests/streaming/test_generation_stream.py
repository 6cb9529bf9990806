"""GenerationStream handle: ordering, exactly one terminal event,
cancellation and the dead-after-terminal rule."""

from __future__ import annotations

import asyncio
from typing import List

import pytest

from lumen_providers.base.errors import ProtocolError, StreamAborted
from lumen_providers.base.logging import get_logger
from lumen_providers.base.streaming import GenerationStream, StreamChunk, StreamEnd, StreamError


async def _events(pieces: List[str], *, fail: bool = False, started: List[bool] | None = None):
    if started is not None:
        started.append(True)
    for piece in pieces:
        await asyncio.sleep(0)
        yield StreamChunk(piece)
    if fail:
        yield StreamError(ProtocolError("boom", "fake", "m"))
    else:
        yield StreamEnd("".join(pieces))


def _stream(gen) -> GenerationStream:
    return GenerationStream(gen, provider="fake", model="m", logger=get_logger("tests.handle"))


@pytest.mark.asyncio
async def test_chunks_concatenate_to_end_payload():
    pieces = ["al", "pha", " ", "beta"]
    stream = _stream(_events(pieces))
    events = [ev async for ev in stream]
    chunks = "".join(ev.text for ev in events if isinstance(ev, StreamChunk))
    assert isinstance(events[-1], StreamEnd) and events[-1].final_text == chunks  # nosec B101
    assert stream.finished and stream.terminal_event == events[-1]  # nosec B101


@pytest.mark.asyncio
async def test_finished_stream_is_dead():
    stream = _stream(_events(["a"]))
    assert await stream.final_text() == "a"  # nosec B101
    assert [ev async for ev in stream] == []  # nosec B101
    stream.cancel()
    assert stream.cancelled is False  # nosec B101


@pytest.mark.asyncio
async def test_final_text_raises_error_cause():
    stream = _stream(_events(["a"], fail=True))
    with pytest.raises(ProtocolError):
        await stream.final_text()


@pytest.mark.asyncio
async def test_cancel_after_two_of_five(log_events):
    stream = _stream(_events(["1", "2", "3", "4", "5"]))
    received = []
    async for ev in stream:
        received.append(ev)
        if len(received) == 2:
            stream.cancel("closed by user")
    assert received == [StreamChunk("1"), StreamChunk("2")]  # nosec B101
    assert stream.terminal_event is None  # nosec B101
    with pytest.raises(StreamAborted):
        await stream.final_text()
    cancelled = [e for e in log_events if e["event"] == "stream.cancelled"]
    assert len(cancelled) == 1 and cancelled[0]["reason"] == "closed by user"  # nosec B101


@pytest.mark.asyncio
async def test_cancel_before_iteration_never_starts_producer():
    started: List[bool] = []
    stream = _stream(_events(["a"], started=started))
    stream.cancel()
    assert [ev async for ev in stream] == []  # nosec B101
    assert started == []  # nosec B101


@pytest.mark.asyncio
async def test_token_cancellation_from_elsewhere():
    stream = _stream(_events(["a", "b", "c"]))
    first = await stream.__anext__()
    stream.token.cancel("shutdown")
    rest = [ev async for ev in stream]
    assert first == StreamChunk("a") and rest == []  # nosec B101
    assert stream.cancelled  # nosec B101


@pytest.mark.asyncio
async def test_context_exit_cancels_unfinished_stream():
    async with _stream(_events(["a", "b"])) as stream:
        await stream.__anext__()
    assert stream.cancelled  # nosec B101
    assert [ev async for ev in stream] == []  # nosec B101
