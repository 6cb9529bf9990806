"""
Structured provider error exception type.

Wraps backend-specific exceptions with a normalized `ErrorCode` so callers
handle every backend's failures the same way and logs carry a stable code.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for display and logs.
        provider: Backend identifier where the error originated (``"ollama"``).
        model: Optional model name associated with the failure.
        retryable: Hint for callers; adapters themselves never retry.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    __hash__ = Exception.__hash__


__all__ = ["ProviderError"]
