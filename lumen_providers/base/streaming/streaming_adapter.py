"""Base streaming adapter: the OPEN -> CHUNK* -> END|ERROR loop.

Every backend supplies two callables:

``starter``
    Coroutine function opening the backend stream and returning an async
    iterator of native chunks (SDK objects, decoded JSON lines...).
``translator``
    Maps one native chunk to its text delta, or ``None`` for control chunks.
    It may raise (e.g. an in-band error line) to fail the stream.

``run()`` accumulates the deltas, yields one :class:`StreamChunk` per
non-empty delta and finishes with exactly one terminal event. Start and
mid-stream failures become :class:`StreamError` with a classified
``ProviderError``. Cancellation (task cancellation or the token) ends the
loop without a terminal event.
"""
from __future__ import annotations

import asyncio
import time
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional

from ..cancellation import CancellationToken
from ..errors import ProviderError, StreamAborted, wrap_exception
from ..logging import LogContext, normalized_log_event
from .events import StreamChunk, StreamEvent
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics


class BaseStreamingAdapter:
    """Encapsulates the provider streaming loop boilerplate."""

    def __init__(
        self,
        *,
        ctx: LogContext,
        provider_name: str,
        model: str,
        starter: Callable[[], Awaitable[AsyncIterator[Any]]],
        translator: Callable[[Any], Optional[str]],
        logger,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        self.ctx = ctx
        self.provider_name = provider_name
        self.model = model
        self._starter = starter
        self._translator = translator
        self._logger = logger
        self._cancellation_token = cancellation_token
        self.metrics = StreamMetrics()

    async def run(self) -> AsyncIterator[StreamEvent]:
        """Execute the streaming lifecycle."""
        t0 = time.perf_counter()
        try:
            stream = await self._starter()
        except (asyncio.CancelledError, StreamAborted):
            raise
        except Exception as exc:
            yield self._fail(exc, t0)
            return

        buffer: List[str] = []
        try:
            async for native in stream:
                if self._cancellation_token is not None:
                    self._cancellation_token.raise_if_cancelled(self.provider_name, self.model)
                delta = self._translator(native)
                if not delta:
                    continue
                if self.metrics.emitted == 0:
                    self.metrics.time_to_first_token_ms = (time.perf_counter() - t0) * 1000.0
                self.metrics.emitted += 1
                buffer.append(delta)
                yield StreamChunk(text=delta)
        except StreamAborted:
            return
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            yield self._fail(exc, t0)
            return
        finally:
            await _close_native(stream)

        self.metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
        yield finalize_stream(
            logger=self._logger,
            ctx=self.ctx,
            metrics=self.metrics,
            final_text="".join(buffer),
        )

    def _fail(self, exc: BaseException, t0: float) -> StreamEvent:
        self.metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
        error: ProviderError = wrap_exception(exc, self.provider_name, self.model)
        return finalize_stream(logger=self._logger, ctx=self.ctx, metrics=self.metrics, error=error)

    def log_start(self, **fields: Any) -> None:
        normalized_log_event(
            self._logger,
            "stream.start",
            self.ctx,
            phase="start",
            attempt=None,
            emitted=None,
            tokens=None,
            **fields,
        )


async def _close_native(stream: Any) -> None:
    """Close a native stream if it exposes ``aclose``."""
    aclose = getattr(stream, "aclose", None)
    if callable(aclose):
        await aclose()


__all__ = ["BaseStreamingAdapter"]
