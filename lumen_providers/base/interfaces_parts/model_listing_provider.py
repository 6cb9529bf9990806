"""ModelListingProvider Protocol (single-class module).

Implemented by backends with a queryable model registry (the local backend).
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class ModelListingProvider(Protocol):
    """Interface to list installed models in discovery order."""

    async def list_models(self) -> List[str]:
        """Query the backend (uncached) and return model names."""
        ...
