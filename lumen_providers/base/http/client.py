"""Async HTTP client construction for the local backend.

Purpose:
    Give adapters one place to build ``httpx.AsyncClient`` instances with
    consistent base URL, headers and timeouts. Timeouts come from
    :func:`get_timeout_config`; callers pick the budget matching the
    endpoint (listing vs. generation).

External dependencies:
    - ``httpx`` for the async HTTP client and pluggable transports.

Lifecycle:
    - ``httpx.AsyncClient`` is bound to the event loop it first runs on, so
      clients are created per call and closed with ``async with``; nothing is
      cached across loops.
    - A transport may be injected (``httpx.MockTransport`` in tests, a custom
      ``AsyncHTTPTransport`` for proxies).
"""

from __future__ import annotations

from typing import Mapping, Optional

import httpx

from ..timeouts import get_timeout_config

USER_AGENT = "lumen-providers"


def build_async_client(
    base_url: str,
    *,
    timeout_seconds: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> httpx.AsyncClient:
    """Return a configured ``httpx.AsyncClient`` for ``base_url``.

    Parameters:
        base_url: Backend root (``http://127.0.0.1:11434``); requests use
            relative paths such as ``/api/tags``.
        timeout_seconds: Read/write/pool budget. Defaults to the generation
            timeout. Connecting is always bounded by the listing timeout so a
            dead host fails fast.
        transport: Optional transport override.
        headers: Extra static headers.
    """
    cfg = get_timeout_config()
    budget = timeout_seconds if timeout_seconds is not None else cfg.generation_timeout_seconds
    timeout = httpx.Timeout(budget, connect=min(budget, cfg.listing_timeout_seconds))
    merged = {"User-Agent": USER_AGENT}
    if headers:
        merged.update(headers)
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        transport=transport,
        headers=merged,
    )


__all__ = ["build_async_client", "USER_AGENT"]
