"""GenerationProvider Protocol (single-class module).

Defines the contract every backend adapter implements.
"""

from __future__ import annotations

from typing import Optional, Protocol, Union, runtime_checkable

from ..models import AdapterState, Completion, GenerationRequest, ModelVerification
from ..streaming import GenerationStream

GenerationResult = Union[Completion, GenerationStream]


@runtime_checkable
class GenerationProvider(Protocol):
    """Interface for backend adapters.

    ``generate`` returns a :class:`Completion` for single-shot requests and a
    :class:`GenerationStream` when ``request.streaming`` is set. It raises
    ``AdapterNotInitialized`` without network I/O while the adapter is
    ``UNINITIALIZED``, and otherwise raises the (post-fallback) backend
    failure. ``verify`` never raises.
    """

    @property
    def provider_name(self) -> str:
        """Canonical backend identifier, e.g. ``"ollama"``."""
        ...

    @property
    def state(self) -> AdapterState:
        ...

    def configure(self, api_key: Optional[str]) -> AdapterState:
        ...

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        ...

    async def verify(self, model_name: str) -> ModelVerification:
        ...


__all__ = ["GenerationProvider", "GenerationResult"]
