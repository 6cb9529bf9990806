"""HTTP client construction for the local backend."""

from __future__ import annotations

import httpx
import pytest

from lumen_providers.base.http import USER_AGENT, build_async_client


@pytest.mark.asyncio
async def test_client_uses_base_url_headers_and_transport():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    async with build_async_client(
        "http://127.0.0.1:11434",
        timeout_seconds=30.0,
        transport=httpx.MockTransport(handler),
        headers={"X-Trace": "1"},
    ) as client:
        resp = await client.get("/api/version")
        assert client.timeout.read == 30.0 and client.timeout.connect == 5.0  # nosec B101
    assert resp.json() == {"ok": True}  # nosec B101
    assert str(seen[0].url) == "http://127.0.0.1:11434/api/version"  # nosec B101
    assert seen[0].headers["User-Agent"] == USER_AGENT and seen[0].headers["X-Trace"] == "1"  # nosec B101


@pytest.mark.asyncio
async def test_default_budget_is_generation_timeout_and_connect_never_exceeds_budget():
    async with build_async_client("http://127.0.0.1:11434") as client:
        assert client.timeout.read == 120.0  # nosec B101
    async with build_async_client("http://127.0.0.1:11434", timeout_seconds=1.0) as client:
        assert client.timeout.connect == 1.0  # nosec B101
