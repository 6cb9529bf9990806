"""Two-endpoint fallback controller.

Purpose
-------
Run a call against a backend's primary endpoint and, if it fails, retry it
exactly once against an alternate endpoint. The caller supplies both calls;
the alternate call must rebuild its request from the original message parts,
never from the failed request body.

Failure semantics
-----------------
- Success on the primary: ``(result, [])``.
- Primary fails, alternate succeeds: ``(result, [FallbackAttempt])``.
- Both fail: the alternate failure is logged and the **primary** failure is
  raised; the alternate never masks it.
- Cancellation (``asyncio.CancelledError``, ``StreamAborted``) propagates
  immediately and never triggers the alternate.
- There is no further cascading and no retry of either endpoint.
- ``fallback.start`` is tagged with the failed primary endpoint,
  ``fallback.end`` and ``fallback.failed`` with the alternate.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from ..errors import ProviderError, StreamAborted, wrap_exception
from ..logging import LogContext, normalized_log_event
from ..models import FallbackAttempt

T = TypeVar("T")


class FallbackController:
    """Primary-then-alternate execution with a single fallback attempt."""

    def __init__(
        self,
        *,
        provider_name: str,
        logger,
        primary_endpoint: str,
        fallback_endpoint: str,
    ) -> None:
        self.provider_name = provider_name
        self.primary_endpoint = primary_endpoint
        self.fallback_endpoint = fallback_endpoint
        self._logger = logger

    async def run(
        self,
        primary: Callable[[], Awaitable[T]],
        fallback: Callable[[], Awaitable[T]],
        ctx: LogContext,
    ) -> Tuple[T, List[FallbackAttempt]]:
        """Execute ``primary``; on failure execute ``fallback`` once."""
        try:
            return await primary(), []
        except (asyncio.CancelledError, StreamAborted):
            raise
        except Exception as exc:
            primary_error = wrap_exception(exc, self.provider_name, ctx.model)

        self._log("fallback.start", ctx.for_endpoint(self.primary_endpoint), attempt=1, error=primary_error)
        secondary_error: Optional[ProviderError] = None
        try:
            result = await fallback()
        except (asyncio.CancelledError, StreamAborted):
            raise
        except Exception as exc:
            secondary_error = wrap_exception(exc, self.provider_name, ctx.model)
        if secondary_error is None:
            self._log("fallback.end", ctx.for_endpoint(self.fallback_endpoint), attempt=1, error=None)
            return result, [FallbackAttempt(self.fallback_endpoint, primary_error, succeeded=True)]

        self._log(
            "fallback.failed",
            ctx.for_endpoint(self.fallback_endpoint),
            attempt=1,
            error=secondary_error,
            primary_error=primary_error,
        )
        raise primary_error

    def _log(
        self,
        event: str,
        ctx: LogContext,
        *,
        attempt: int,
        error: Optional[ProviderError],
        primary_error: Optional[ProviderError] = None,
    ) -> None:
        normalized_log_event(
            self._logger,
            event,
            ctx,
            phase="fallback",
            attempt=attempt,
            emitted=None,
            tokens=None,
            error_code=error.code.value if error is not None else None,
            error=error.message if error is not None else None,
            primary_endpoint=self.primary_endpoint,
            fallback_endpoint=self.fallback_endpoint,
            primary_error=primary_error.message if primary_error is not None else None,
        )


__all__ = ["FallbackController", "FallbackAttempt"]
