"""Ollama model discovery and verification.

Purpose
    List installed models, probe the daemon, and verify that a model exists
    and accepts images before it is used.

External Dependencies
    * Local Ollama HTTP API: ``GET /api/tags``, ``GET /api/show?name=`` and
      ``GET /api/version`` through a caller-supplied ``httpx.AsyncClient``.

Verification Semantics
    1. List installed models. A refused or reset connection is reported as
       "not running", an expired listing timeout as "misconfigured"; neither
       is ever reported as a missing model.
    2. Missing model: ``exists=False`` with every installed model and up to
       five multimodal suggestions in discovery order (no suggestions when
       nothing multimodal is installed).
    3. Present model: declared families from ``/api/show`` are matched first,
       then the model name. Detail failures fall back to the name alone.
    4. ``needs_pull`` is always ``False``.

Timeout Strategy
    The caller builds the client with ``get_timeout_config().listing_timeout_seconds``.
"""

from __future__ import annotations

from typing import List, Optional

import httpx

from ..base.capabilities import classify_multimodal, suggest_models
from ..base.errors import (
    BackendUnreachable,
    ErrorCode,
    ModelNotFound,
    ProtocolError,
    ProviderError,
    TransportError,
    wrap_exception,
)
from ..base.logging import LogContext, normalized_log_event
from ..base.models import ModelVerification
from .helpers import PROVIDER, SHOW_ENDPOINT, TAGS_ENDPOINT, VERSION_ENDPOINT, decode_body


def unreachable_message(host: str) -> str:
    return f"Unable to connect to Ollama. Is Ollama running at {host}?"


def timeout_message(host: str) -> str:
    return f"Ollama at {host} did not answer in time. Check the configured host and port."


def _connection_error(exc: httpx.TransportError, host: str, model: Optional[str]) -> ProviderError:
    """Map an httpx transport failure to a human-readable error kind."""
    error = wrap_exception(exc, PROVIDER, model)
    if isinstance(error, BackendUnreachable):
        return BackendUnreachable(unreachable_message(host), PROVIDER, model, raw=exc)
    if isinstance(error, TransportError) and error.is_timeout:
        return TransportError(timeout_message(host), PROVIDER, model, code=ErrorCode.TIMEOUT, raw=exc)
    return error


async def fetch_model_names(client: httpx.AsyncClient, *, host: str, model: Optional[str] = None) -> List[str]:
    """Return installed model names in discovery order.

    Raises:
        BackendUnreachable: daemon not running at ``host``.
        TransportError: listing timed out (``code == timeout``) or other transport failure.
        ProtocolError: non-200 status or malformed body.
    """
    try:
        resp = await client.get(TAGS_ENDPOINT)
    except httpx.TransportError as exc:
        raise _connection_error(exc, host, model) from exc
    if resp.status_code != 200:
        raise ProtocolError(
            f"Failed to get list of models (status {resp.status_code})",
            PROVIDER,
            model,
            status=resp.status_code,
        )
    body = decode_body(resp, model=model, endpoint=TAGS_ENDPOINT)
    entries = body.get("models") or []
    if not isinstance(entries, list):
        raise ProtocolError(f"{TAGS_ENDPOINT} returned no model list", PROVIDER, model)
    return [m["name"] for m in entries if isinstance(m, dict) and isinstance(m.get("name"), str)]


async def fetch_families(client: httpx.AsyncClient, model_name: str, *, logger, ctx: LogContext) -> Optional[List[str]]:
    """Return the declared families of ``model_name`` or ``None`` when unavailable."""
    try:
        resp = await client.get(SHOW_ENDPOINT, params={"name": model_name})
    except httpx.TransportError as exc:
        normalized_log_event(
            logger,
            "verify.detail_unavailable",
            ctx,
            phase="verify",
            error_code=wrap_exception(exc, PROVIDER, model_name).code.value,
            error=str(exc) or exc.__class__.__name__,
        )
        return None
    if resp.status_code != 200:
        return None
    try:
        body = resp.json()
    except ValueError:
        return None
    details = body.get("details") if isinstance(body, dict) else None
    if not isinstance(details, dict):
        return None
    families = [f for f in (details.get("families") or []) if isinstance(f, str)]
    family = details.get("family")
    if isinstance(family, str):
        families.append(family)
    return families


async def verify_model(
    client: httpx.AsyncClient,
    model_name: str,
    *,
    host: str,
    logger,
    ctx: Optional[LogContext] = None,
) -> ModelVerification:
    """Verify ``model_name`` against the daemon; never raises for backend failures."""
    ctx = ctx or LogContext(provider=PROVIDER, model=model_name)
    normalized_log_event(logger, "verify.start", ctx, phase="verify", host=host)
    try:
        available = await fetch_model_names(client, host=host, model=model_name)
    except ProviderError as err:
        return _end(logger, ctx, ModelVerification(exists=False, error=err.message, error_code=err.code.value))

    if model_name not in available:
        missing = ModelNotFound(
            model_name,
            PROVIDER,
            available_models=available,
            suggested_models=suggest_models(available),
            message=f'Model "{model_name}" is not available on your Ollama server',
        )
        return _end(
            logger,
            ctx,
            ModelVerification(
                exists=False,
                error=missing.message,
                available_models=missing.available_models,
                suggested_models=missing.suggested_models,
                error_code=missing.code.value,
            ),
        )

    families = await fetch_families(client, model_name, logger=logger, ctx=ctx)
    return _end(
        logger,
        ctx,
        ModelVerification(exists=True, is_multimodal=classify_multimodal(model_name, families), needs_pull=False),
    )


def _end(logger, ctx: LogContext, result: ModelVerification) -> ModelVerification:
    normalized_log_event(
        logger,
        "verify.end",
        ctx,
        phase="verify",
        error_code=result.error_code,
        exists=result.exists,
        is_multimodal=result.is_multimodal,
    )
    return result


async def fetch_version(client: httpx.AsyncClient, *, host: str) -> str:
    """Return the daemon version string from ``/api/version``."""
    try:
        resp = await client.get(VERSION_ENDPOINT)
    except httpx.TransportError as exc:
        raise _connection_error(exc, host, None) from exc
    if resp.status_code != 200:
        raise ProtocolError(
            f"{VERSION_ENDPOINT} returned status {resp.status_code}",
            PROVIDER,
            status=resp.status_code,
        )
    body = decode_body(resp, model=None, endpoint=VERSION_ENDPOINT)
    return str(body.get("version") or "")


__all__ = [
    "fetch_model_names",
    "fetch_families",
    "verify_model",
    "fetch_version",
    "unreachable_message",
    "timeout_message",
]
