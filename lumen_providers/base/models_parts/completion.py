"""Complete (non-streaming) generation result."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .fallback_attempt import FallbackAttempt


@dataclass(frozen=True)
class Completion:
    """The full answer of a single-shot generation call.

    ``fallbacks`` lists, in order, every fallback attempt made while producing
    ``text``; it is empty when the primary endpoint answered.
    """

    text: str
    provider: str
    model: Optional[str] = None
    fallbacks: Tuple[FallbackAttempt, ...] = ()

    @property
    def fell_back(self) -> bool:
        return bool(self.fallbacks)


__all__ = ["Completion"]
