"""Terminal event creation with consolidated metrics logging."""
from __future__ import annotations

from typing import Optional

from ..errors import ProviderError
from ..logging import LogContext, normalized_log_event
from .events import StreamEnd, StreamError
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    final_text: str = "",
    error: Optional[ProviderError] = None,
) -> StreamEnd | StreamError:
    """Log the stream's metrics and return its terminal event."""
    normalized_log_event(
        logger,
        "stream.adapter.end" if error is None else "stream.adapter.error",
        ctx,
        phase="finalize",
        attempt=None,
        emitted=metrics.emitted > 0,
        tokens=None,
        error_code=error.code.value if error is not None else None,
        emitted_count=metrics.emitted,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=error.message if error is not None else None,
    )
    if error is not None:
        return StreamError(cause=error)
    return StreamEnd(final_text=final_text)


__all__ = ["finalize_stream"]
