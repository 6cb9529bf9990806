"""Capability table: multimodal and reasoning family detection.

Backends expose little reliable capability metadata, so classification is a
case-insensitive substring match of model names (or declared family names)
against a list of known family tokens. The token list is a parameter of every
function so callers and tests can swap it without touching adapters.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ...config.defaults import (
    MULTIMODAL_FAMILY_TOKENS,
    REASONING_FAMILY_TOKENS,
    SUGGESTION_LIMIT,
)


def matches_family(name: Optional[str], tokens: Sequence[str] = MULTIMODAL_FAMILY_TOKENS) -> bool:
    """Return True when ``name`` contains any of ``tokens`` (case-insensitive)."""
    if not name:
        return False
    lowered = str(name).lower()
    return any(token.lower() in lowered for token in tokens)


def classify_multimodal(
    model_name: str,
    families: Optional[Iterable[str]] = None,
    tokens: Sequence[str] = MULTIMODAL_FAMILY_TOKENS,
) -> bool:
    """Decide whether a model accepts images.

    Declared ``families`` (model detail metadata) are checked first; when they
    are missing or match nothing, the model name itself is checked.
    """
    for family in families or ():
        if matches_family(family, tokens):
            return True
    return matches_family(model_name, tokens)


def suggest_models(
    available: Iterable[str],
    tokens: Sequence[str] = MULTIMODAL_FAMILY_TOKENS,
    limit: int = SUGGESTION_LIMIT,
) -> List[str]:
    """Return up to ``limit`` multimodal models from ``available``, in discovery order.

    An empty list is returned when nothing matches; there is no fallback to
    unfiltered models.
    """
    out: List[str] = []
    for name in available:
        if len(out) >= limit:
            break
        if matches_family(name, tokens):
            out.append(name)
    return out


def is_reasoning_model(model_name: Optional[str], tokens: Sequence[str] = REASONING_FAMILY_TOKENS) -> bool:
    """Return True for models that take images through the ``images`` side channel."""
    return matches_family(model_name, tokens)


__all__ = [
    "matches_family",
    "classify_multimodal",
    "suggest_models",
    "is_reasoning_model",
]
