"""Unified provider error taxonomy public surface.

Re-exports the one-class-per-file implementations under
``lumen_providers.base.errors_parts`` behind a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.error_kinds import (
    AdapterNotInitialized,
    BackendUnreachable,
    MalformedMessage,
    ModelNotFound,
    ProtocolError,
    StreamAborted,
    TransportError,
)
from .errors_parts.classification import classify_exception, wrap_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "AdapterNotInitialized",
    "TransportError",
    "BackendUnreachable",
    "ProtocolError",
    "ModelNotFound",
    "MalformedMessage",
    "StreamAborted",
    "classify_exception",
    "wrap_exception",
]
