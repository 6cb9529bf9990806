"""OpenAI provider adapter (hosted backend A, chat-completions style).

Purpose:
    Translate the provider-agnostic parts into Chat Completions messages and
    run them through the official async SDK, returning a complete answer or a
    stream of text deltas.

External dependencies:
    - ``openai`` (``AsyncOpenAI``). The client is built when a credential is
      configured; until then the adapter is ``UNINITIALIZED`` and never
      touches the network.

Request shape:
    - One user turn per part, in order: text parts carry plain string
      content, image parts a single ``image_url`` block with a data URI.
    - ``max_tokens`` defaults to ``OPENAI_DEFAULT_MAX_TOKENS``; temperature,
      top-p and top-k are not sent.

Timeout strategy:
    - The SDK's per-request ``timeout`` is set from ``get_timeout_config()``
      (generation budget for single-shot calls, stream budget for streams).
      The same budget bounds the awaited call through ``run_with_timeout``,
      so expiry always surfaces as ``TransportError(timeout)``.
    - The SDK's own retries are disabled; there is no fallback endpoint.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, List, Optional

from openai import AsyncOpenAI

from ..base.errors import ProtocolError
from ..base.logging import LogContext
from ..base.models import Completion, FallbackAttempt, GenerationRequest, ImagePart, MessagePart, TextPart
from ..base.provider_base import BaseProviderAdapter
from ..base.timeouts import get_timeout_config, run_with_timeout
from ..base.utils.messages import image_data_uri
from ..config import get_provider_config
from ..config.defaults import OPENAI_DEFAULT_MAX_TOKENS, OPENAI_DEFAULT_MODEL

__all__ = ["OpenAIProvider", "build_messages"]


def build_messages(parts: List[MessagePart]) -> List[Dict[str, Any]]:
    """Map parts to Chat Completions messages, one user turn per part."""
    messages: List[Dict[str, Any]] = []
    for part in parts:
        if isinstance(part, TextPart):
            messages.append({"role": "user", "content": part.value})
        elif isinstance(part, ImagePart):
            messages.append(
                {
                    "role": "user",
                    "content": [{"type": "image_url", "image_url": {"url": image_data_uri(part)}}],
                }
            )
    return messages


class OpenAIProvider(BaseProviderAdapter):
    """Adapter for the OpenAI Chat Completions API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        """Resolve configuration and configure the SDK when a key is available.

        Args:
            api_key: Explicit key; otherwise ``OPENAI_API_KEY`` or the config file.
            model: Default model; otherwise ``OPENAI_MODEL`` or the built-in default.
            base_url: Optional API base URL (proxies, compatible gateways).
        """
        cfg = get_provider_config(
            "openai",
            overrides={"api_key": api_key, "model": model, "base_url": base_url},
        )
        self._base_url: Optional[str] = cfg.get("base_url")
        self._client: Optional[AsyncOpenAI] = None
        super().__init__(
            api_key=cfg.get("api_key"),
            default_model=cfg.get("model") or OPENAI_DEFAULT_MODEL,
            logger_name="openai",
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    def _on_configure(self, api_key: str) -> None:
        self._client = AsyncOpenAI(api_key=api_key, base_url=self._base_url, max_retries=0)

    @staticmethod
    def _budget(stream: bool) -> float:
        timeouts = get_timeout_config()
        return timeouts.stream_timeout_seconds if stream else timeouts.generation_timeout_seconds

    def _params(self, request: GenerationRequest, model: str, *, stream: bool) -> Dict[str, Any]:
        return {
            "model": model,
            "messages": build_messages(list(request.parts)),
            "max_tokens": request.max_tokens or OPENAI_DEFAULT_MAX_TOKENS,
            "stream": stream,
            "timeout": self._budget(stream),
        }

    async def _complete(self, request: GenerationRequest, model: str, ctx: LogContext) -> Completion:
        resp = await run_with_timeout(
            self._client.chat.completions.create(**self._params(request, model, stream=False)),
            self._budget(False),
            provider=self.provider_name,
            model=model,
        )
        try:
            text = resp.choices[0].message.content or ""
        except (AttributeError, IndexError, TypeError) as exc:
            raise ProtocolError("response carried no choices", self.provider_name, model, raw=exc) from exc
        return Completion(text=text, provider=self.provider_name, model=model)

    async def _open_stream(
        self,
        request: GenerationRequest,
        model: str,
        ctx: LogContext,
        fallbacks: List[FallbackAttempt],
    ) -> AsyncIterator[Any]:
        sdk_stream = await run_with_timeout(
            self._client.chat.completions.create(**self._params(request, model, stream=True)),
            self._budget(True),
            provider=self.provider_name,
            model=model,
        )

        async def _chunks() -> AsyncIterator[Any]:
            try:
                async for chunk in sdk_stream:
                    yield chunk
            finally:
                await sdk_stream.close()

        return _chunks()

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        """Return ``choices[0].delta.content`` or ``None`` for empty/control chunks."""
        choices = getattr(chunk, "choices", None)
        if not choices:
            return None
        delta = getattr(choices[0], "delta", None)
        return getattr(delta, "content", None) or None
