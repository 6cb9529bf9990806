"""Resilience helpers (endpoint fallback)."""

from .fallback import FallbackController

__all__ = ["FallbackController"]
