"""lumen_providers package

Send mixed text and image prompts to interchangeable AI backends (OpenAI,
Gemini, a local Ollama daemon) and get back either a complete answer or a
stream of text chunks, with backend wire formats, capability checks and
failure modes hidden behind one surface.

Public API (re-exported):
    - Version: ``__version__``
    - Requests and results: :class:`GenerationRequest`, :class:`TextPart`,
      :class:`ImagePart`, :func:`build_parts`, :class:`Completion`,
      :class:`GenerationStream`, :class:`ModelVerification`
    - Errors: :class:`ProviderError`, :class:`ErrorCode` and the concrete kinds
    - Registry: :class:`ProviderRegistry`, :class:`ProviderFactory`
    - Module-level helpers backed by a lazily created default registry:
      :func:`generate`, :func:`verify_model`, :func:`set_provider`,
      :func:`get_registry`

Example::

    from lumen_providers import GenerationRequest, build_parts, generate, set_provider

    set_provider("ollama")
    result = await generate(GenerationRequest(build_parts("What is this?", [png_b64])))
"""

from __future__ import annotations

import threading
from typing import Optional

from .base.errors import (
    AdapterNotInitialized,
    BackendUnreachable,
    ErrorCode,
    MalformedMessage,
    ModelNotFound,
    ProtocolError,
    ProviderError,
    StreamAborted,
    TransportError,
)
from .base.dto import AdapterParams
from .base.factory import ProviderFactory, UnknownProviderError
from .base.interfaces import GenerationResult
from .base.models import (
    Completion,
    FallbackAttempt,
    GenerationRequest,
    ImagePart,
    ModelVerification,
    TextPart,
    build_parts,
)
from .base.registry import ProviderRegistry
from .base.streaming import GenerationStream, StreamChunk, StreamEnd, StreamError

__version__ = "0.1.0"

_default_registry: Optional[ProviderRegistry] = None
_default_lock = threading.Lock()


def get_registry() -> ProviderRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = ProviderRegistry()
    return _default_registry


def set_provider(provider: str) -> str:
    """Select the backend used by subsequent :func:`generate` calls."""
    return get_registry().set_provider(provider)


async def generate(request: GenerationRequest, provider: Optional[str] = None) -> GenerationResult:
    """Run ``request`` on ``provider`` or the currently selected backend."""
    return await get_registry().generate(request, provider)


async def verify_model(model_name: str, provider: Optional[str] = None) -> ModelVerification:
    """Verify ``model_name``; failures are returned, never raised."""
    return await get_registry().verify_model(model_name, provider)


__all__ = [
    "__version__",
    # Requests and results
    "GenerationRequest",
    "TextPart",
    "ImagePart",
    "build_parts",
    "Completion",
    "FallbackAttempt",
    "GenerationResult",
    "GenerationStream",
    "StreamChunk",
    "StreamEnd",
    "StreamError",
    "ModelVerification",
    # Errors
    "ProviderError",
    "ErrorCode",
    "AdapterNotInitialized",
    "TransportError",
    "BackendUnreachable",
    "ProtocolError",
    "ModelNotFound",
    "MalformedMessage",
    "StreamAborted",
    "UnknownProviderError",
    # Registry
    "AdapterParams",
    "ProviderFactory",
    "ProviderRegistry",
    "get_registry",
    "set_provider",
    "generate",
    "verify_model",
]
