"""GeminiProvider adapter (hosted backend B, generate-content style).

Uses google-generativeai (>=0.8) ``GenerativeModel`` with the async
``generate_content_async`` API for both response modes.

Request shape: a single user turn whose ``parts`` preserve the original
order, text as ``{"text": ...}`` and images as ``inline_data`` blobs of the
decoded bytes. Generation config defaults to temperature 0.4, top-p 0.95,
top-k 40 and 8192 output tokens; request values override each knob.

Each SDK call is bounded by ``run_with_timeout`` with the same budget passed
in ``request_options``, so expiry surfaces as ``TransportError(timeout)``.

The API key is installed with ``genai.configure``, which is process-global
SDK state: two instances configured with different keys overwrite each
other, and the last ``configure`` wins for both.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, List, Optional

import google.generativeai as genai

from ..base.errors import ProtocolError
from ..base.logging import LogContext
from ..base.models import Completion, FallbackAttempt, GenerationRequest, ImagePart, MessagePart, TextPart
from ..base.provider_base import BaseProviderAdapter
from ..base.timeouts import get_timeout_config, run_with_timeout
from ..config import get_provider_config
from ..config.defaults import (
    GEMINI_DEFAULT_MAX_TOKENS,
    GEMINI_DEFAULT_MODEL,
    GEMINI_DEFAULT_TEMPERATURE,
    GEMINI_DEFAULT_TOP_K,
    GEMINI_DEFAULT_TOP_P,
)


def build_contents(parts: List[MessagePart]) -> List[Dict[str, Any]]:
    """Wrap all parts, in order, into one user turn."""
    native: List[Dict[str, Any]] = []
    for part in parts:
        if isinstance(part, TextPart):
            native.append({"text": part.value})
        elif isinstance(part, ImagePart):
            native.append({"inline_data": {"mime_type": part.mime_type, "data": part.decoded()}})
    return [{"role": "user", "parts": native}]


def build_generation_config(request: GenerationRequest) -> Dict[str, Any]:
    """Merge request knobs over the tuned defaults."""
    return {
        "temperature": request.temperature if request.temperature is not None else GEMINI_DEFAULT_TEMPERATURE,
        "top_p": request.top_p if request.top_p is not None else GEMINI_DEFAULT_TOP_P,
        "top_k": request.top_k if request.top_k is not None else GEMINI_DEFAULT_TOP_K,
        "max_output_tokens": request.max_tokens or GEMINI_DEFAULT_MAX_TOKENS,
    }


class GeminiProvider(BaseProviderAdapter):
    """Gemini adapter for single-shot and streaming generation."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None) -> None:
        """Resolve configuration and configure the SDK when a key is available.

        Args:
            api_key: Explicit key; otherwise ``GEMINI_API_KEY``/``GOOGLE_API_KEY``.
            model: Default model; otherwise ``GEMINI_MODEL`` or the built-in default.
        """
        cfg = get_provider_config("gemini", overrides={"api_key": api_key, "model": model})
        super().__init__(
            api_key=cfg.get("api_key"),
            default_model=cfg.get("model") or GEMINI_DEFAULT_MODEL,
            logger_name="gemini",
        )

    @property
    def provider_name(self) -> str:
        return "gemini"

    def _on_configure(self, api_key: str) -> None:
        genai.configure(api_key=api_key)

    def _build_model(self, model_name: str, request: GenerationRequest):
        """Create the ``GenerativeModel`` carrying this request's generation config."""
        return genai.GenerativeModel(
            model_name=model_name,
            generation_config=build_generation_config(request),
        )

    async def _complete(self, request: GenerationRequest, model: str, ctx: LogContext) -> Completion:
        gen_model = self._build_model(model, request)
        budget = get_timeout_config().generation_timeout_seconds
        resp = await run_with_timeout(
            gen_model.generate_content_async(build_contents(list(request.parts)), request_options={"timeout": budget}),
            budget,
            provider=self.provider_name,
            model=model,
        )
        return Completion(text=self._extract_text_from_response(resp, model), provider=self.provider_name, model=model)

    async def _open_stream(
        self,
        request: GenerationRequest,
        model: str,
        ctx: LogContext,
        fallbacks: List[FallbackAttempt],
    ) -> AsyncIterator[Any]:
        gen_model = self._build_model(model, request)
        budget = get_timeout_config().stream_timeout_seconds
        response = await run_with_timeout(
            gen_model.generate_content_async(
                build_contents(list(request.parts)),
                stream=True,
                request_options={"timeout": budget},
            ),
            budget,
            provider=self.provider_name,
            model=model,
        )

        async def _chunks() -> AsyncIterator[Any]:
            async for chunk in response:
                yield chunk

        return _chunks()

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        """Translate a streaming chunk to its text delta.

        ``chunk.text`` raises ``ValueError`` for chunks without text parts
        (finish markers, safety metadata); those fall through to the first
        candidate's first part and otherwise yield ``None``.
        """
        try:
            text = chunk.text
        except (AttributeError, ValueError):
            text = None
        if text:
            return text
        try:
            parts = chunk.candidates[0].content.parts
        except (AttributeError, IndexError, TypeError):
            return None
        if not parts:
            return None
        return getattr(parts[0], "text", None) or None

    def _extract_text_from_response(self, resp: Any, model: str) -> str:
        """Read ``resp.text``; a response without text (blocked prompt) is a protocol error."""
        try:
            return resp.text or ""
        except (AttributeError, ValueError) as exc:
            raise ProtocolError(
                f"response carried no text: {exc}",
                self.provider_name,
                model,
                raw=exc,
            ) from exc


__all__ = ["GeminiProvider", "build_contents", "build_generation_config"]
