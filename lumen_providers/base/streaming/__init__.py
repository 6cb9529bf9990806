"""Streaming primitives: events, the adapter loop and the stream handle."""

from .events import StreamChunk, StreamEnd, StreamError, StreamEvent
from .generation_stream import GenerationStream
from .streaming_adapter import BaseStreamingAdapter
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics

__all__ = [
    "StreamChunk",
    "StreamEnd",
    "StreamError",
    "StreamEvent",
    "GenerationStream",
    "BaseStreamingAdapter",
    "finalize_stream",
    "StreamMetrics",
]
