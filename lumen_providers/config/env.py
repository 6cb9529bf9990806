"""lumen_providers.config.env
==========================

Centralized environment variable mapping and helpers for backend credentials.

Purpose
-------
- Single source of truth mapping backend identifiers to the environment
  variable names that carry their API keys (canonical name first, then
  aliases).
- Placeholder detection so template values copied from sample ``.env`` files
  never move an adapter out of the ``UNINITIALIZED`` state.

Failure Modes
-------------
Helpers never raise on unknown backends or unset variables; they return
``None`` and let callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical backend -> env var mapping. The local backend needs no key.
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

# Backend -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example", "your_")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder value.

    Heuristics: contains ``placeholder``, ``changeme``, ``example`` or
    ``your_`` (as in ``YOUR_OPENAI_API_KEY``), or starts with ``test_``.
    The check is case-insensitive and ignores surrounding whitespace.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return any(marker in v for marker in _PLACEHOLDER_MARKERS) or v.startswith("test_")


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a backend, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_name)`` for the first usable key found.

    Empty and placeholder values are skipped. Returns ``(None, None)`` when no
    candidate variable holds a usable key.
    """
    for name in get_env_var_candidates(provider):
        val = os.getenv(name)
        if val and val.strip() and not is_placeholder(val):
            return val.strip(), name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_provider_key",
]
