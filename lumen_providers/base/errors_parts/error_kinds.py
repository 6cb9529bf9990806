"""
Concrete error kinds raised by the generation layer.

Each kind is a :class:`ProviderError` with a fixed (or narrowly chosen)
``ErrorCode`` so callers can either ``except`` the specific class or switch on
``code``. Display layers render ``TransportError``/``BackendUnreachable`` as
"is the service running?", ``ModelNotFound`` with its suggestions, and
``StreamAborted`` not at all.
"""
from __future__ import annotations

from typing import List, Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class AdapterNotInitialized(ProviderError):
    """Generation was requested before a credential was configured."""

    def __init__(self, provider: str, model: Optional[str] = None, message: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.NOT_INITIALIZED,
            message=message or f"{provider} adapter is not initialized; configure an API key first",
            provider=provider,
            model=model,
        )


class TransportError(ProviderError):
    """Connection-level failure: refused, reset, or timed out."""

    def __init__(
        self,
        message: str,
        provider: str,
        model: Optional[str] = None,
        *,
        code: ErrorCode = ErrorCode.TRANSIENT,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=code, message=message, provider=provider, model=model, retryable=True, raw=raw)

    @property
    def is_timeout(self) -> bool:
        return self.code is ErrorCode.TIMEOUT


class BackendUnreachable(TransportError):
    """The backend refused or dropped the connection (service not running)."""

    def __init__(
        self,
        message: str,
        provider: str,
        model: Optional[str] = None,
        *,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, provider, model, code=ErrorCode.UNAVAILABLE, raw=raw)


class ProtocolError(ProviderError):
    """Unexpected status or malformed response body."""

    def __init__(
        self,
        message: str,
        provider: str,
        model: Optional[str] = None,
        *,
        code: ErrorCode = ErrorCode.PROTOCOL,
        status: Optional[int] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=code, message=message, provider=provider, model=model, raw=raw)
        self.status = status


class ModelNotFound(ProviderError):
    """The requested model is not installed on the backend."""

    def __init__(
        self,
        model: str,
        provider: str,
        *,
        available_models: Optional[List[str]] = None,
        suggested_models: Optional[List[str]] = None,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message or f'Model "{model}" is not available on your {provider} server',
            provider=provider,
            model=model,
        )
        self.available_models = list(available_models or [])
        self.suggested_models = list(suggested_models or [])


class MalformedMessage(ProviderError):
    """A request part is neither text nor image, or the request is empty."""

    def __init__(self, message: str, provider: str = "core", model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message, provider=provider, model=model)


class StreamAborted(ProviderError):
    """The consumer cancelled the stream; never retried, rendered silently."""

    def __init__(self, provider: str, model: Optional[str] = None, reason: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.CANCELLED,
            message=reason or "stream cancelled by consumer",
            provider=provider,
            model=model,
        )


__all__ = [
    "AdapterNotInitialized",
    "TransportError",
    "BackendUnreachable",
    "ProtocolError",
    "ModelNotFound",
    "MalformedMessage",
    "StreamAborted",
]
