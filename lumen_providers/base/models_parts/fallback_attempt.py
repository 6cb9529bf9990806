"""Record of one fallback attempt made by the fallback controller."""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import ProviderError


@dataclass(frozen=True)
class FallbackAttempt:
    """One switch from the primary endpoint to the alternate one.

    Attributes:
        endpoint: Alternate endpoint that was tried (e.g. ``/api/generate``).
        cause: Failure of the primary endpoint that triggered the attempt.
        succeeded: Whether the alternate endpoint produced the result.
    """

    endpoint: str
    cause: ProviderError
    succeeded: bool = True


__all__ = ["FallbackAttempt"]
