"""Typed parameter object for adapter initialization.

Purpose
-------
A small, backend-agnostic DTO used by the factory and the registry to
construct or reconfigure adapters without long argument lists.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()``.

Failure modes
-------------
Pure data container; Pydantic raises ``ValidationError`` on wrongly typed
input.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class AdapterParams(BaseModel):
    """Common adapter initialization parameters.

    Attributes
    ----------
    provider:
        Canonical backend identifier; ignored by adapter constructors.
    model:
        Default model used when a request names none.
    api_key:
        Credential for hosted backends. Blank values are treated as absent.
    host:
        Base URL of the local backend daemon.
    extra:
        Backend-specific keyword arguments (e.g. ``transport`` for tests).
    """

    model_config = {"arbitrary_types_allowed": True}

    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None
    host: Optional[str] = None
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("api_key", "model", "host")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None


__all__ = ["AdapterParams"]
