"""Streaming metrics data structure."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class StreamMetrics:
    """Collected metrics for a single streaming invocation.

    Attributes:
        emitted: Number of chunk events delivered.
        time_to_first_token_ms: Delay between start and the first chunk.
        total_duration_ms: Delay between start and the terminal event.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None


__all__ = ["StreamMetrics"]
