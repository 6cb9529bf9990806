"""Shared base class for backend adapters.

Purpose:
- Hold what every adapter has in common: the ``UNINITIALIZED -> READY``
  credential state machine, the default model, the structured logger, and
  the ``generate`` dispatch into single-shot or streaming execution.

Subclasses implement:
- ``provider_name``
- ``_on_configure(api_key)``: build the SDK client for a new credential.
- ``_complete(request, model, ctx)``: return a :class:`Completion`.
- ``_open_stream(request, model, ctx, fallbacks)``: open the backend stream
  and return an async iterator of native chunks, appending to ``fallbacks``
  when an alternate endpoint had to be used.
- ``_translate_chunk(chunk)``: native chunk to text delta (or ``None``).

Failure semantics:
- ``generate`` while ``UNINITIALIZED`` raises ``AdapterNotInitialized`` before
  any network I/O, for both response modes.
- Single-shot failures are wrapped into the matching ``ProviderError`` kind and
  raised; adapters never retry.
- Streaming failures are delivered as the stream's terminal error event.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, AsyncIterator, List, Optional

from ..config.env import is_placeholder
from .cancellation import CancellationToken
from .errors import AdapterNotInitialized, wrap_exception
from .interfaces import GenerationResult
from .logging import LogContext, get_logger, normalized_log_event
from .models import AdapterState, Completion, FallbackAttempt, GenerationRequest, ModelVerification
from .streaming import BaseStreamingAdapter, GenerationStream


class BaseProviderAdapter:
    """Common adapter plumbing; see module docstring for the subclass contract."""

    #: Backends without credentials (the local daemon) start out READY.
    requires_api_key: bool = True

    def __init__(self, *, api_key: Optional[str], default_model: str, logger_name: str) -> None:
        self._api_key: Optional[str] = None
        self._model = default_model
        self._logger = get_logger(logger_name)
        self._state = AdapterState.UNINITIALIZED if self.requires_api_key else AdapterState.READY
        if api_key:
            self.configure(api_key)

    # ----- Abstract surface -----
    @property
    def provider_name(self) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def _on_configure(self, api_key: str) -> None:  # pragma: no cover - abstract
        raise NotImplementedError

    async def _complete(self, request: GenerationRequest, model: str, ctx: LogContext) -> Completion:  # pragma: no cover - abstract
        raise NotImplementedError

    async def _open_stream(
        self,
        request: GenerationRequest,
        model: str,
        ctx: LogContext,
        fallbacks: List[FallbackAttempt],
    ) -> AsyncIterator[Any]:  # pragma: no cover - abstract
        raise NotImplementedError

    def _translate_chunk(self, chunk: Any) -> Optional[str]:  # pragma: no cover - abstract
        raise NotImplementedError

    # ----- State -----
    @property
    def state(self) -> AdapterState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is AdapterState.READY

    def default_model(self) -> Optional[str]:
        return self._model

    def configure(self, api_key: Optional[str]) -> AdapterState:
        """Install a credential and move to ``READY``.

        Empty and placeholder keys clear the credential and return the adapter
        to ``UNINITIALIZED``. Backends without credentials ignore the call.
        """
        if not self.requires_api_key:
            return self._state
        if not api_key or not api_key.strip() or is_placeholder(api_key):
            self._api_key = None
            self._state = AdapterState.UNINITIALIZED
            return self._state
        self._on_configure(api_key.strip())
        self._api_key = api_key.strip()
        self._state = AdapterState.READY
        return self._state

    def require_ready(self, model: Optional[str] = None) -> None:
        """Raise ``AdapterNotInitialized`` unless the adapter is ``READY``."""
        if self._state is not AdapterState.READY:
            raise AdapterNotInitialized(self.provider_name, model)

    # ----- Generation -----
    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Run ``request`` and return a :class:`Completion` or a :class:`GenerationStream`."""
        model = request.model or self._model
        self.require_ready(model)
        ctx = LogContext(provider=self.provider_name, model=model, request_id=uuid.uuid4().hex[:12])
        if request.streaming:
            return self._start_stream(request, model, ctx)

        normalized_log_event(
            self._logger,
            "generate.start",
            ctx,
            phase="start",
            attempt=None,
            emitted=None,
            tokens=None,
            parts=len(request.parts),
            has_images=request.has_images,
            max_tokens=request.max_tokens,
        )
        t0 = time.perf_counter()
        try:
            completion = await self._complete(request, model, ctx)
        except Exception as exc:
            error = wrap_exception(exc, self.provider_name, model)
            normalized_log_event(
                self._logger,
                "generate.error",
                ctx,
                phase="finalize",
                attempt=None,
                emitted=False,
                tokens=None,
                error_code=error.code.value,
                error=error.message,
            )
            if error is exc:
                raise
            raise error from exc
        normalized_log_event(
            self._logger,
            "generate.end",
            ctx,
            phase="finalize",
            attempt=None,
            emitted=True,
            tokens=None,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
            fallbacks=len(completion.fallbacks),
        )
        return completion

    def _start_stream(self, request: GenerationRequest, model: str, ctx: LogContext) -> GenerationStream:
        token = CancellationToken()
        fallbacks: List[FallbackAttempt] = []

        async def _starter() -> AsyncIterator[Any]:
            return await self._open_stream(request, model, ctx, fallbacks)

        adapter = BaseStreamingAdapter(
            ctx=ctx,
            provider_name=self.provider_name,
            model=model,
            starter=_starter,
            translator=self._translate_chunk,
            logger=self._logger,
            cancellation_token=token,
        )
        adapter.log_start(parts=len(request.parts), has_images=request.has_images)
        return GenerationStream(
            adapter.run(),
            provider=self.provider_name,
            model=model,
            token=token,
            logger=self._logger,
            ctx=ctx,
            fallbacks=fallbacks,
        )

    async def verify(self, model_name: str) -> ModelVerification:
        """Hosted backends expose no model registry; report the permissive default."""
        return ModelVerification.permissive()


__all__ = ["BaseProviderAdapter"]
