"""Stream handle: a single-producer, single-consumer event channel.

``GenerationStream`` wraps the event iterator of a
:class:`~.streaming_adapter.BaseStreamingAdapter` run. The producer task
starts on first iteration and forwards events into a one-slot queue, so the
adapter never reads ahead of the consumer by more than one event.

Guarantees
----------
- Events arrive in transport order, ending with exactly one terminal event.
- After the terminal event (or after ``cancel``) the handle is dead:
  iteration stops immediately and nothing new is delivered.
- ``cancel`` aborts the producer task (closing the HTTP stream), discards
  anything already queued, and suppresses every further event.

A consumer that may stop early (``break`` or an exception inside
``async for``) must use ``async with`` or call ``aclose``. Leaving the loop
does not reach the handle, so without either the producer stays parked on
the queue and the transport stays open.
"""
from __future__ import annotations

import asyncio
from typing import AsyncGenerator, List, Optional

from ..cancellation import CancellationToken
from ..errors import StreamAborted, wrap_exception
from ..logging import LogContext, normalized_log_event
from ..models import FallbackAttempt
from .events import StreamEnd, StreamError, StreamEvent

_SENTINEL = object()


class GenerationStream:
    """Async-iterable handle over one streaming generation."""

    def __init__(
        self,
        events: AsyncGenerator[StreamEvent, None],
        *,
        provider: str,
        model: str,
        token: Optional[CancellationToken] = None,
        logger=None,
        ctx: Optional[LogContext] = None,
        fallbacks: Optional[List[FallbackAttempt]] = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.fallbacks: List[FallbackAttempt] = fallbacks if fallbacks is not None else []
        self._events = events
        self._token = token or CancellationToken()
        self._logger = logger
        self._ctx = ctx or LogContext(provider=provider, model=model)
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._task: Optional[asyncio.Task] = None
        self._closed = False
        self._cancelled = False
        self._terminal: Optional[StreamEvent] = None
        self._token.add_callback(self._abort)

    # API -----------------------------------------------------------------
    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def finished(self) -> bool:
        """Whether the terminal event was delivered or the stream was cancelled."""
        return self._closed

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def terminal_event(self) -> Optional[StreamEvent]:
        return self._terminal

    def cancel(self, reason: Optional[str] = None) -> None:
        """Abort the stream; safe to call repeatedly or after completion."""
        if self._closed and self._terminal is not None:
            return
        self._token.cancel(reason or "cancelled by consumer")

    async def final_text(self) -> str:
        """Drain the stream and return the complete text.

        Raises:
            ProviderError: the cause carried by a terminal error event.
            StreamAborted: the stream was cancelled.
        """
        async for _ in self:
            pass
        if isinstance(self._terminal, StreamEnd):
            return self._terminal.final_text
        if isinstance(self._terminal, StreamError):
            raise self._terminal.cause
        raise StreamAborted(self.provider, self.model, self._token.reason)

    # Async iteration -----------------------------------------------------
    def __aiter__(self) -> "GenerationStream":
        return self

    async def __anext__(self) -> StreamEvent:
        if self._closed or (self._cancelled and self._task is None):
            self._closed = True
            raise StopAsyncIteration
        self._ensure_started()
        item = await self._queue.get()
        if self._cancelled or item is _SENTINEL:
            self._closed = True
            raise StopAsyncIteration
        if item.is_terminal:
            self._closed = True
            self._terminal = item
        return item

    async def __aenter__(self) -> "GenerationStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose("stream context exited")

    async def aclose(self, reason: Optional[str] = None) -> None:
        """Stop the stream and wait until the producer has released the transport."""
        if not self._closed:
            self.cancel(reason or "stream closed by consumer")
        self._closed = True
        if self._task is None:
            await self._events.aclose()
        elif not self._task.done():
            await asyncio.wait([self._task])

    # Internals -----------------------------------------------------------
    def _ensure_started(self) -> None:
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._produce())

    async def _produce(self) -> None:
        try:
            async for event in self._events:
                await self._queue.put(event)
                if event.is_terminal:
                    return
        except StreamAborted:
            # token cancelled; _abort already woke the consumer
            return
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            await self._queue.put(StreamError(cause=wrap_exception(exc, self.provider, self.model)))
            return
        finally:
            await self._events.aclose()
        if not self._cancelled:
            await self._queue.put(_SENTINEL)

    def _abort(self, reason: Optional[str]) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_SENTINEL)
        if self._logger is not None:
            normalized_log_event(
                self._logger,
                "stream.cancelled",
                self._ctx,
                phase="mid_stream",
                attempt=None,
                emitted=None,
                tokens=None,
                error_code="cancelled",
                reason=reason,
            )


__all__ = ["GenerationStream"]
