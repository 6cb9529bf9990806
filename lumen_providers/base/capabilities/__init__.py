"""Capability table public surface."""

from .core import classify_multimodal, is_reasoning_model, matches_family, suggest_models

__all__ = ["classify_multimodal", "is_reasoning_model", "matches_family", "suggest_models"]
