"""Unit tests for error classification and wrapping."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from lumen_providers.base.errors import (
    AdapterNotInitialized,
    BackendUnreachable,
    ErrorCode,
    MalformedMessage,
    ModelNotFound,
    ProtocolError,
    ProviderError,
    StreamAborted,
    TransportError,
    classify_exception,
    wrap_exception,
)


class _StatusError(Exception):
    def __init__(self, status_code: int, msg: str = "") -> None:
        super().__init__(msg)
        self.status_code = status_code


class _ResponseError(Exception):
    def __init__(self, status: int) -> None:
        super().__init__("http error")
        self.response = type("Resp", (), {"status_code": status})()


_REQ = httpx.Request("GET", "http://127.0.0.1:11434/api/tags")


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (TimeoutError(), ErrorCode.TIMEOUT),
        (asyncio.TimeoutError(), ErrorCode.TIMEOUT),
        (httpx.ReadTimeout("slow", request=_REQ), ErrorCode.TIMEOUT),
        (ConnectionRefusedError(), ErrorCode.UNAVAILABLE),
        (httpx.ConnectError("refused", request=_REQ), ErrorCode.UNAVAILABLE),
        (httpx.ReadError("broken", request=_REQ), ErrorCode.TRANSIENT),
        (_StatusError(401), ErrorCode.AUTH),
        (_StatusError(429), ErrorCode.RATE_LIMIT),
        (_ResponseError(503), ErrorCode.UNAVAILABLE),
        (RuntimeError("model does not exist"), ErrorCode.NOT_FOUND),
        (RuntimeError("something odd"), ErrorCode.UNKNOWN),
    ],
)
def test_classify_exception(exc, expected):
    assert classify_exception(exc) is expected  # nosec B101


def test_provider_error_passthrough():
    err = ModelNotFound("x", "ollama", available_models=["a"], suggested_models=[])
    assert classify_exception(err) is ErrorCode.NOT_FOUND  # nosec B101
    assert wrap_exception(err, "other") is err  # nosec B101


def test_wrap_exception_kinds():
    timeout = wrap_exception(httpx.ConnectTimeout("slow", request=_REQ), "ollama", "m")
    assert type(timeout) is TransportError and timeout.is_timeout  # nosec B101

    refused = wrap_exception(ConnectionResetError("reset"), "ollama", "m")
    assert isinstance(refused, BackendUnreachable) and refused.code is ErrorCode.UNAVAILABLE  # nosec B101
    assert isinstance(refused, TransportError) and not refused.is_timeout  # nosec B101

    bad = wrap_exception(ValueError("weird body"), "openai", "gpt")
    assert isinstance(bad, ProtocolError) and bad.code is ErrorCode.PROTOCOL  # nosec B101
    assert bad.raw is not None and bad.provider == "openai" and bad.model == "gpt"  # nosec B101

    gateway = wrap_exception(_StatusError(504), "gemini")
    assert isinstance(gateway, ProtocolError) and gateway.status == 504  # nosec B101
    assert gateway.code is ErrorCode.TIMEOUT  # nosec B101


def test_fixed_codes_of_error_kinds():
    assert AdapterNotInitialized("openai").code is ErrorCode.NOT_INITIALIZED  # nosec B101
    assert MalformedMessage("bad").code is ErrorCode.VALIDATION  # nosec B101
    assert StreamAborted("ollama").code is ErrorCode.CANCELLED  # nosec B101
    missing = ModelNotFound("llava", "ollama", suggested_models=["llava:7b"])
    assert missing.message == 'Model "llava" is not available on your ollama server'  # nosec B101
    assert missing.available_models == [] and missing.suggested_models == ["llava:7b"]  # nosec B101


def test_provider_errors_are_hashable_and_printable():
    err = ProtocolError("boom", "ollama", "m")
    assert isinstance(err, ProviderError) and {err}  # nosec B101
    assert str(err) == "ollama:m protocol: boom"  # nosec B101
