"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, httpx transport
exception handling, and message-based heuristics as a last resort for SDKs
that only carry a string. :func:`wrap_exception` turns any exception into the
matching concrete error kind.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .error_kinds import BackendUnreachable, ProtocolError, TransportError
from .provider_error import ProviderError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from a backend exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.code`` (google-api-core style)
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status", "code"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


_PATTERN_GROUPS = (
    (ErrorCode.UNAVAILABLE, ("connection refused",)),
    (ErrorCode.UNAVAILABLE, ("connection error",)),
    (ErrorCode.UNAVAILABLE, ("connection reset",)),
    (ErrorCode.UNAVAILABLE, ("econnrefused",)),
    (ErrorCode.TIMEOUT, ("timeout",)),
    (ErrorCode.TIMEOUT, ("timed out",)),
    (ErrorCode.AUTH, ("api key",)),
    (ErrorCode.AUTH, ("unauthorized",)),
    (ErrorCode.AUTH, ("forbidden",)),
    (ErrorCode.NOT_FOUND, ("not found",)),
    (ErrorCode.NOT_FOUND, ("does not exist",)),
    (ErrorCode.RATE_LIMIT, ("rate limit",)),
    (ErrorCode.UNSUPPORTED, ("not supported",)),
    (ErrorCode.VALIDATION, ("invalid",)),
    (ErrorCode.VALIDATION, ("malformed",)),
    (ErrorCode.SERVER_ERROR, ("internal error",)),
)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    """Substring heuristic mapping for exceptions without structure."""
    for code, patterns in _PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (stdlib, asyncio, httpx).
        3. Connection failures (stdlib, httpx).
        4. HTTP status mapping.
        5. Substring heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, (ConnectionError, httpx.ConnectError, httpx.RemoteProtocolError)):
        return ErrorCode.UNAVAILABLE
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSIENT
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


def wrap_exception(exc: BaseException, provider: str, model: Optional[str] = None) -> ProviderError:
    """Convert ``exc`` into the matching concrete :class:`ProviderError` kind.

    - ``ProviderError`` instances are returned unchanged.
    - Timeouts become ``TransportError`` with code ``timeout``.
    - Refused/reset connections become ``BackendUnreachable``.
    - Other transport failures become ``TransportError`` (``transient``).
    - Everything else (bad status, undecodable body, SDK errors) becomes
      ``ProtocolError`` carrying the classified code and HTTP status if known.
    """
    if isinstance(exc, ProviderError):
        return exc
    code = classify_exception(exc)
    message = str(exc) or exc.__class__.__name__
    if code is ErrorCode.TIMEOUT and _extract_status(exc) is None:
        return TransportError(message, provider, model, code=ErrorCode.TIMEOUT, raw=exc)
    if code is ErrorCode.UNAVAILABLE and _extract_status(exc) is None:
        return BackendUnreachable(message, provider, model, raw=exc)
    if isinstance(exc, httpx.TransportError):
        return TransportError(message, provider, model, code=code, raw=exc)
    status = _extract_status(exc)
    return ProtocolError(
        message,
        provider,
        model,
        code=code if code is not ErrorCode.UNKNOWN else ErrorCode.PROTOCOL,
        status=status,
        raw=exc,
    )


__all__ = [
    "classify_exception",
    "wrap_exception",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
