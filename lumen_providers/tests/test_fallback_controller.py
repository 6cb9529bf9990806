"""Primary-then-alternate execution."""

from __future__ import annotations

import asyncio

import pytest

from lumen_providers.base.errors import ErrorCode, ProtocolError, StreamAborted
from lumen_providers.base.logging import LogContext, get_logger
from lumen_providers.base.resilience import FallbackController


def _controller() -> FallbackController:
    return FallbackController(
        provider_name="fake",
        logger=get_logger("tests.fallback"),
        primary_endpoint="/primary",
        fallback_endpoint="/alternate",
    )


class _Calls:
    def __init__(self) -> None:
        self.order = []

    def ok(self, name, value):
        async def call():
            self.order.append(name)
            return value

        return call

    def fail(self, name, exc):
        async def call():
            self.order.append(name)
            raise exc

        return call


_CTX = LogContext(provider="fake", model="m")


@pytest.mark.asyncio
async def test_primary_success_never_touches_alternate(log_events):
    calls = _Calls()
    result, attempts = await _controller().run(calls.ok("primary", 1), calls.ok("alternate", 2), _CTX)
    assert (result, attempts, calls.order) == (1, [], ["primary"])  # nosec B101
    assert not any(e["event"].startswith("fallback.") for e in log_events)  # nosec B101


@pytest.mark.asyncio
async def test_alternate_runs_exactly_once(log_events):
    calls = _Calls()
    boom = ProtocolError("chat failed", "fake", "m", code=ErrorCode.SERVER_ERROR, status=500)
    result, attempts = await _controller().run(calls.fail("primary", boom), calls.ok("alternate", 2), _CTX)
    assert result == 2 and calls.order == ["primary", "alternate"]  # nosec B101
    assert len(attempts) == 1 and attempts[0].endpoint == "/alternate"  # nosec B101
    assert attempts[0].cause is boom and attempts[0].succeeded  # nosec B101
    names = [e["event"] for e in log_events]
    assert names == ["fallback.start", "fallback.end"]  # nosec B101
    assert log_events[0]["error_code"] == "server_error" and log_events[0]["attempt"] == 1  # nosec B101
    assert "error_code" not in log_events[1]  # nosec B101
    assert [e["endpoint"] for e in log_events] == ["/primary", "/alternate"]  # nosec B101


@pytest.mark.asyncio
async def test_double_failure_raises_primary_error(log_events):
    calls = _Calls()
    first = ProtocolError("chat failed", "fake", "m")
    second = ConnectionRefusedError("connection refused")
    with pytest.raises(ProtocolError) as info:
        await _controller().run(calls.fail("primary", first), calls.fail("alternate", second), _CTX)
    assert info.value is first and calls.order == ["primary", "alternate"]  # nosec B101
    failed = [e for e in log_events if e["event"] == "fallback.failed"]
    assert failed[0]["error_code"] == "unavailable" and failed[0]["primary_error"] == "chat failed"  # nosec B101
    assert failed[0]["endpoint"] == "/alternate"  # nosec B101


@pytest.mark.asyncio
async def test_non_provider_primary_error_is_wrapped():
    calls = _Calls()
    with pytest.raises(ProtocolError) as info:
        await _controller().run(
            calls.fail("primary", ValueError("weird")), calls.fail("alternate", ValueError("odd")), _CTX
        )
    assert info.value.message == "weird" and info.value.provider == "fake"  # nosec B101


@pytest.mark.asyncio
@pytest.mark.parametrize("exc", [asyncio.CancelledError(), StreamAborted("fake", "m")])
async def test_cancellation_never_falls_back(exc):
    calls = _Calls()
    with pytest.raises(type(exc)):
        await _controller().run(calls.fail("primary", exc), calls.ok("alternate", 2), _CTX)
    assert calls.order == ["primary"]  # nosec B101
