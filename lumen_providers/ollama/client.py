"""Ollama provider adapter (local backend).

Purpose:
        Implements single-shot and streaming generation against the local
        Ollama HTTP API (default ``http://127.0.0.1:11434``), plus model
        listing, model verification and a version probe.

External dependencies:
        - HTTP client only (``httpx``). No SDK or API key is required since
          Ollama is a local daemon, so the adapter is READY at construction.

Timeout strategy:
        - Listing, detail and version requests use the listing budget.
        - Single-shot generation uses the generation budget, or the reasoning
          budget for the reasoning family.
        - Streams use the stream budget as the per-read limit: the connection
          is abandoned when no bytes arrive within it. It is not a deadline
          for the whole response.

Fallback semantics:
        - ``/api/chat`` is tried first; on any failure the flattened prompt is
          sent once to ``/api/generate`` through :class:`FallbackController`.
          When both fail the chat failure is raised.
        - Streaming applies the same order when opening the stream. The
          fallback answer is requested non-streamed and delivered as a single
          chunk followed by the end event. Failures after the chat stream has
          started are reported as the stream's error and never fall back.
"""

from __future__ import annotations

from contextlib import AsyncExitStack
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from ..base.capabilities import is_reasoning_model
from ..base.http import build_async_client
from ..base.logging import LogContext
from ..base.models import Completion, FallbackAttempt, GenerationRequest, ModelVerification
from ..base.provider_base import BaseProviderAdapter
from ..base.resilience import FallbackController
from ..base.timeouts import get_timeout_config
from ..config import get_provider_config
from ..config.defaults import OLLAMA_DEFAULT_HOST, OLLAMA_DEFAULT_MODEL
from . import verify as _verify
from .helpers import (
    CHAT_ENDPOINT,
    GENERATE_ENDPOINT,
    PROVIDER,
    build_chat_messages,
    build_chat_payload,
    build_generate_payload,
    build_reasoning_messages,
    chat_text,
    decode_body,
    generate_text,
    iter_ndjson,
    normalize_host,
    raise_for_status,
    translate_stream_line,
)


def _coerce_non_empty_str(candidate: Any, fallback: str) -> str:
    """Return ``candidate`` stripped, or ``fallback`` when it is missing or blank."""
    if candidate is None:
        return fallback
    coerced = str(candidate).strip()
    return coerced or fallback


class OllamaProvider(BaseProviderAdapter):
    """Adapter for a local Ollama daemon."""

    requires_api_key = False

    def __init__(
        self,
        host: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_key: Optional[str] = None,
    ) -> None:
        """Initialize the Ollama provider with configuration overrides.

        Parameters
        ----------
        host:
            Explicit daemon URL. When omitted, resolved from the layered
            configuration (config file, ``OLLAMA_HOST``) and finally
            ``http://127.0.0.1:11434``. ``localhost`` is pinned to IPv4.
        model:
            Default model for requests naming none (``OLLAMA_MODEL`` or
            ``llava:latest``).
        transport:
            Optional ``httpx`` transport (``httpx.MockTransport`` in tests).
        api_key:
            Accepted for constructor parity with hosted backends; ignored.
        """
        cfg = get_provider_config("ollama", overrides={"host": host, "model": model})
        self._host = normalize_host(_coerce_non_empty_str(cfg.get("host"), OLLAMA_DEFAULT_HOST))
        self._transport = transport
        super().__init__(
            api_key=None,
            default_model=_coerce_non_empty_str(cfg.get("model"), OLLAMA_DEFAULT_MODEL),
            logger_name="ollama",
        )
        self._fallback = FallbackController(
            provider_name=PROVIDER,
            logger=self._logger,
            primary_endpoint=CHAT_ENDPOINT,
            fallback_endpoint=GENERATE_ENDPOINT,
        )

    @property
    def provider_name(self) -> str:
        return PROVIDER

    @property
    def host(self) -> str:
        return self._host

    def set_host(self, host: str) -> None:
        """Point the adapter at another daemon; affects calls issued afterwards."""
        self._host = normalize_host(_coerce_non_empty_str(host, OLLAMA_DEFAULT_HOST))

    def _client(self, timeout_seconds: float) -> httpx.AsyncClient:
        return build_async_client(self._host, timeout_seconds=timeout_seconds, transport=self._transport)

    # ---- Request shapes ----
    @staticmethod
    def _chat_messages(request: GenerationRequest, model: str) -> List[Dict[str, Any]]:
        if is_reasoning_model(model):
            return build_reasoning_messages(request.parts)
        return build_chat_messages(request.parts)

    # ---- Single-shot ----
    async def _chat_once(self, request: GenerationRequest, model: str, timeout: float) -> str:
        payload = build_chat_payload(model, self._chat_messages(request, model), stream=False)
        async with self._client(timeout) as client:
            resp = await client.post(CHAT_ENDPOINT, json=payload)
        raise_for_status(resp, model=model, endpoint=CHAT_ENDPOINT)
        return chat_text(decode_body(resp, model=model, endpoint=CHAT_ENDPOINT), model=model)

    async def _generate_once(self, request: GenerationRequest, model: str, timeout: float) -> str:
        payload = build_generate_payload(model, request.parts, reasoning=is_reasoning_model(model))
        async with self._client(timeout) as client:
            resp = await client.post(GENERATE_ENDPOINT, json=payload)
        raise_for_status(resp, model=model, endpoint=GENERATE_ENDPOINT)
        return generate_text(decode_body(resp, model=model, endpoint=GENERATE_ENDPOINT), model=model)

    async def _complete(self, request: GenerationRequest, model: str, ctx: LogContext) -> Completion:
        timeout = get_timeout_config().generation_for(reasoning=is_reasoning_model(model), streaming=False)
        text, attempts = await self._fallback.run(
            lambda: self._chat_once(request, model, timeout),
            lambda: self._generate_once(request, model, timeout),
            ctx,
        )
        return Completion(text=text, provider=PROVIDER, model=model, fallbacks=tuple(attempts))

    # ---- Streaming ----
    async def _open_stream(
        self,
        request: GenerationRequest,
        model: str,
        ctx: LogContext,
        fallbacks: List[FallbackAttempt],
    ) -> AsyncIterator[Any]:
        stream, attempts = await self._fallback.run(
            lambda: self._open_chat_stream(request, model, ctx),
            lambda: self._single_chunk_stream(request, model),
            ctx,
        )
        fallbacks.extend(attempts)
        return stream

    async def _open_chat_stream(self, request: GenerationRequest, model: str, ctx: LogContext) -> AsyncIterator[Any]:
        """Send the streaming chat request and fail before returning on a bad status."""
        payload = build_chat_payload(model, self._chat_messages(request, model), stream=True)
        stack = AsyncExitStack()
        try:
            client = await stack.enter_async_context(self._client(get_timeout_config().stream_timeout_seconds))
            resp = await client.send(client.build_request("POST", CHAT_ENDPOINT, json=payload), stream=True)
            stack.push_async_callback(resp.aclose)
            if resp.is_error:
                await resp.aread()
                raise_for_status(resp, model=model, endpoint=CHAT_ENDPOINT)
        except BaseException:
            await stack.aclose()
            raise
        return self._stream_lines(stack, resp, ctx)

    async def _stream_lines(self, stack: AsyncExitStack, resp: httpx.Response, ctx: LogContext) -> AsyncIterator[Any]:
        async with stack:
            async for obj in iter_ndjson(resp, logger=self._logger, ctx=ctx):
                yield obj

    async def _single_chunk_stream(self, request: GenerationRequest, model: str) -> AsyncIterator[Any]:
        timeout = get_timeout_config().generation_for(reasoning=is_reasoning_model(model), streaming=False)
        text = await self._generate_once(request, model, timeout)
        return _one_line({"response": text, "done": True})

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        return translate_stream_line(chunk)

    # ---- Discovery ----
    async def list_models(self) -> List[str]:
        """Return installed model names in discovery order."""
        async with self._client(get_timeout_config().listing_timeout_seconds) as client:
            return await _verify.fetch_model_names(client, host=self._host)

    async def verify(self, model_name: str) -> ModelVerification:
        """Check that ``model_name`` is installed and whether it accepts images."""
        ctx = LogContext(provider=PROVIDER, model=model_name)
        async with self._client(get_timeout_config().listing_timeout_seconds) as client:
            return await _verify.verify_model(client, model_name, host=self._host, logger=self._logger, ctx=ctx)

    async def check_connection(self) -> str:
        """Return the daemon version; raises ``BackendUnreachable`` when it is down."""
        async with self._client(get_timeout_config().listing_timeout_seconds) as client:
            return await _verify.fetch_version(client, host=self._host)


async def _one_line(obj: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
    yield obj


__all__ = ["OllamaProvider"]
