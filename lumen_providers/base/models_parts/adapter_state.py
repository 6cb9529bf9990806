"""Adapter lifecycle state."""
from __future__ import annotations

from enum import Enum


class AdapterState(str, Enum):
    """``UNINITIALIZED`` until a credential is configured, then ``READY``."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


__all__ = ["AdapterState"]
