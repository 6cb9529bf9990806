"""
Provider-agnostic DTOs for the generation layer.

Re-exports the single-class modules under ``models_parts``:

- :class:`TextPart`, :class:`ImagePart`, ``MessagePart`` and
  :func:`build_parts` (prompt content)
- :class:`GenerationRequest` (what callers submit)
- :class:`Completion` and :class:`FallbackAttempt` (single-shot results)
- :class:`ModelVerification` (verification results)
- :class:`AdapterState` (adapter lifecycle)
"""
from __future__ import annotations

from .models_parts.adapter_state import AdapterState
from .models_parts.completion import Completion
from .models_parts.fallback_attempt import FallbackAttempt
from .models_parts.generation_request import GenerationRequest
from .models_parts.message_part import ImagePart, MessagePart, TextPart, build_parts
from .models_parts.model_verification import ModelVerification

__all__ = [
    "AdapterState",
    "Completion",
    "FallbackAttempt",
    "GenerationRequest",
    "ImagePart",
    "MessagePart",
    "TextPart",
    "build_parts",
    "ModelVerification",
]
