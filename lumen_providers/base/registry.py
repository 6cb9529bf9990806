"""Provider registry: lazily built, process-lifetime adapter cache.

Purpose
-------
Own one adapter instance per backend identifier, created on first use through
:class:`ProviderFactory` and kept for the life of the registry (never
evicted), plus the currently selected backend.

Concurrency
-----------
- Adapter creation is guarded by a lock so concurrent first use of a backend
  builds exactly one instance.
- ``generate`` reads the selection once when called; ``set_provider`` only
  affects calls issued afterwards. Callers that need isolation pass
  ``provider=`` explicitly instead of relying on the shared selection.
"""
from __future__ import annotations

import asyncio
import threading
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from ..config.defaults import DEFAULT_PROVIDER
from .dto.adapter_params import AdapterParams
from .errors import (
    BackendUnreachable,
    ErrorCode,
    ModelNotFound,
    ProtocolError,
    wrap_exception,
)
from .factory import ProviderFactory, UnknownProviderError
from .interfaces import GenerationResult
from .logging import LogContext, get_logger, normalized_log_event
from .models import AdapterState, GenerationRequest, ModelVerification


class ProviderRegistry:
    """Select, cache and dispatch to backend adapters."""

    def __init__(
        self,
        selected: str = DEFAULT_PROVIDER,
        *,
        factory: Type[ProviderFactory] = ProviderFactory,
        params: Optional[Mapping[str, AdapterParams]] = None,
    ) -> None:
        self._factory = factory
        self._selected = factory.normalize(selected)
        self._params: Dict[str, AdapterParams] = {
            factory.normalize(k): v for k, v in (params or {}).items()
        }
        self._adapters: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._logger = get_logger("registry")

    # ----- Selection -----
    @property
    def selected(self) -> str:
        return self._selected

    def set_provider(self, provider: str) -> str:
        """Select ``provider`` for subsequent calls; in-flight calls are unaffected."""
        name = self._factory.normalize(provider)
        previous, self._selected = self._selected, name
        normalized_log_event(
            self._logger,
            "registry.select",
            LogContext(provider=name),
            phase="select",
            previous=previous,
        )
        return name

    # ----- Adapter cache -----
    def get(self, provider: Optional[str] = None) -> Any:
        """Return the cached adapter for ``provider`` (default: selected), creating it once."""
        name = self._factory.normalize(provider or self._selected)
        adapter = self._adapters.get(name)
        if adapter is not None:
            return adapter
        with self._lock:
            adapter = self._adapters.get(name)
            if adapter is None:
                adapter = self._factory.create(name, params=self._params.get(name))
                self._adapters[name] = adapter
                normalized_log_event(
                    self._logger,
                    "registry.create",
                    LogContext(provider=name, model=adapter.default_model()),
                    phase="create",
                    state=adapter.state.value,
                )
        return adapter

    def cached(self) -> Tuple[str, ...]:
        """Identifiers of adapters constructed so far."""
        return tuple(self._adapters)

    def configure(self, provider: str, api_key: Optional[str] = None) -> AdapterState:
        """Install a credential on ``provider``'s adapter and return its new state."""
        return self.get(provider).configure(api_key)

    # ----- Operations -----
    async def generate(self, request: GenerationRequest, provider: Optional[str] = None) -> GenerationResult:
        """Dispatch ``request`` to ``provider`` or the backend selected right now."""
        adapter = self.get(provider or self._selected)
        return await adapter.generate(request)

    async def verify_model(self, model_name: str, provider: Optional[str] = None) -> ModelVerification:
        """Verify ``model_name``; failures are returned as values, never raised."""
        name = provider or self._selected
        try:
            return await self.get(name).verify(model_name)
        except asyncio.CancelledError:
            raise
        except UnknownProviderError as exc:
            return ModelVerification(exists=False, error=str(exc), error_code=ErrorCode.VALIDATION.value)
        except Exception as exc:
            error = wrap_exception(exc, str(name), model_name)
            return ModelVerification(exists=False, error=error.message, error_code=error.code.value)

    async def ensure_model(self, model_name: str, provider: Optional[str] = None) -> ModelVerification:
        """Verify ``model_name`` and raise the matching error kind if it is unusable."""
        name = provider or self._selected
        result = await self.verify_model(model_name, name)
        if result.exists:
            return result
        message = result.error or f'Model "{model_name}" could not be verified'
        if result.error_code == ErrorCode.NOT_FOUND.value:
            raise ModelNotFound(
                model_name,
                name,
                available_models=result.available_models,
                suggested_models=result.suggested_models,
                message=message,
            )
        # an unanswered listing counts as unreachable; the message tells it apart
        if result.error_code in (ErrorCode.UNAVAILABLE.value, ErrorCode.TIMEOUT.value):
            raise BackendUnreachable(message, name, model_name)
        raise ProtocolError(message, name, model_name)


__all__ = ["ProviderRegistry"]
