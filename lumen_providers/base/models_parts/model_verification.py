"""
Model verification result.

Constructed fresh per verification call and never cached. Failures are
values, not exceptions: ``exists=False`` plus a human-readable ``error`` and a
machine-readable ``error_code`` telling "service not running" apart from
"model not installed".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ModelVerification:
    """Outcome of checking a model against a backend.

    Attributes:
        exists: The backend has the model.
        is_multimodal: The model accepts image input.
        needs_pull: Reserved; always ``False`` (pulling models is out of scope).
        error: Human-readable failure description.
        available_models: Every installed model in discovery order (not-found case).
        suggested_models: Up to five installed multimodal models (not-found case).
        error_code: ``ErrorCode`` value of the failure (``not_found``,
            ``unavailable``, ``timeout``, ``protocol``...).
    """

    exists: bool
    is_multimodal: bool = False
    needs_pull: bool = False
    error: Optional[str] = None
    available_models: Optional[List[str]] = None
    suggested_models: Optional[List[str]] = None
    error_code: Optional[str] = None

    @classmethod
    def permissive(cls) -> "ModelVerification":
        """Default for backends without a queryable model registry."""
        return cls(exists=True, is_multimodal=True, needs_pull=False)

    @property
    def ok(self) -> bool:
        return self.exists and self.error is None


__all__ = ["ModelVerification"]
