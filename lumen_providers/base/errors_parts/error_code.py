"""
Normalized provider error codes (taxonomy).

Defines the `ErrorCode` enumeration shared by every adapter, the fallback
controller and the capability verifier. Values are lowercase snake_case and
are a stable public contract for logging and for display layers deciding how
to render a failure.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NOT_INITIALIZED = "not_initialized"
    PROTOCOL = "protocol"
    SERVER_ERROR = "server_error"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
