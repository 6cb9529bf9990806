"""Cooperative cancellation token implementation.

``CancellationToken`` is shared between a stream handle and the producer
feeding it. Cancelling the token flips the flag polled by the streaming loop
and runs registered callbacks (the stream handle uses one to abort its
producer task).
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, List, Optional

from ..errors import StreamAborted
from .state import State


class CancellationToken:
    """A cooperative cancellation token.

    Thread-safe for ``cancel`` + ``raise_if_cancelled``.
    """

    def __init__(self) -> None:
        self._state = State()
        self._lock = Lock()
        self._callbacks: List[Callable[[Optional[str]], None]] = []

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation and fire callbacks once."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            callback(reason)

    def add_callback(self, callback: Callable[[Optional[str]], None]) -> None:
        """Run ``callback(reason)`` on cancellation (immediately if already cancelled)."""
        with self._lock:
            if not self._state.cancelled:
                self._callbacks.append(callback)
                return
            reason = self._state.reason
        callback(reason)

    def raise_if_cancelled(self, provider: str = "core", model: Optional[str] = None) -> None:
        """Raise ``StreamAborted`` if the token is cancelled."""
        if self._state.cancelled:
            raise StreamAborted(provider, model, self._state.reason)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._state.cancelled}, reason={self._state.reason!r})"


__all__ = ["CancellationToken"]
