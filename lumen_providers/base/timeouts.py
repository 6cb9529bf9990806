"""Endpoint-specific timeout configuration.

Purpose
-------
Centralize the fixed timeouts used by every backend call. Listing and
capability queries are short; generation calls are long because image-bearing
reasoning completions are slow. Expiry always surfaces as a
``TransportError`` with code ``timeout``, never as a protocol error.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use only (and again whenever one of them changes). Supported
    environment variables (all optional, positive floats):
        LUMEN_TIMEOUT_LISTING_SECONDS
        LUMEN_TIMEOUT_GENERATION_SECONDS
        LUMEN_TIMEOUT_REASONING_SECONDS
        LUMEN_TIMEOUT_STREAM_SECONDS

run_with_timeout(awaitable, seconds, ...)
    Bound an SDK coroutine that has no timeout knob of its own.
"""
from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar

from .errors import ErrorCode, TransportError

T = TypeVar("T")

_ENV_NAMES = (
    "LUMEN_TIMEOUT_LISTING_SECONDS",
    "LUMEN_TIMEOUT_GENERATION_SECONDS",
    "LUMEN_TIMEOUT_REASONING_SECONDS",
    "LUMEN_TIMEOUT_STREAM_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        listing_timeout_seconds: Model listing, model detail, version probe.
        generation_timeout_seconds: Non-streaming generation on any backend.
        reasoning_timeout_seconds: Generation against the reasoning family.
        stream_timeout_seconds: Streaming budget: per-read limit on the local
            backend, bound on opening the stream on hosted backends.
    """

    listing_timeout_seconds: float = 5.0
    generation_timeout_seconds: float = 120.0
    reasoning_timeout_seconds: float = 180.0
    stream_timeout_seconds: float = 300.0

    def generation_for(self, *, reasoning: bool, streaming: bool) -> float:
        """Pick the generation budget for a call shape."""
        if streaming:
            return self.stream_timeout_seconds
        return self.reasoning_timeout_seconds if reasoning else self.generation_timeout_seconds


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; unset, invalid or non-positive yields ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        listing_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.listing_timeout_seconds),
        generation_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.generation_timeout_seconds),
        reasoning_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.reasoning_timeout_seconds),
        stream_timeout_seconds=_parse_env_float(_ENV_NAMES[3], defaults.stream_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


async def run_with_timeout(
    awaitable: Awaitable[T],
    seconds: float,
    *,
    provider: str,
    model: Optional[str] = None,
) -> T:
    """Await ``awaitable`` for at most ``seconds``.

    Raises:
        TransportError: code ``timeout`` when the deadline elapses.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError as exc:
        raise TransportError(
            f"request exceeded {seconds:g}s",
            provider,
            model,
            code=ErrorCode.TIMEOUT,
            raw=exc,
        ) from exc


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "run_with_timeout",
]
