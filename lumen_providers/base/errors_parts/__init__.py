"""Errors parts package public surface.

Prefer importing from `lumen_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .error_kinds import (
    AdapterNotInitialized,
    BackendUnreachable,
    MalformedMessage,
    ModelNotFound,
    ProtocolError,
    StreamAborted,
    TransportError,
)
from .classification import classify_exception, wrap_exception

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
