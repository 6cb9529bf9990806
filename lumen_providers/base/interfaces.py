"""
Provider-agnostic interfaces (Protocols) for the generation layer.

Re-exports the single-class modules under
``lumen_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import (
    GenerationProvider,
    GenerationResult,
    HasDefaultModel,
    ModelListingProvider,
)

__all__ = [
    "GenerationProvider",
    "GenerationResult",
    "HasDefaultModel",
    "ModelListingProvider",
]
