"""Ollama helpers module.

Purpose:
- Side-effect-free utilities for the Ollama adapter: host normalization,
  request payload construction for the chat and generate endpoints, response
  decoding, and the newline-delimited JSON reader used while streaming. Kept
  apart from ``client.py`` so the request shapes are testable without I/O.

External dependencies:
- ``httpx`` response objects only; no SDK and no API key (local daemon).

Request shapes:
- Chat turns: a text part opens a user turn with string content; an image
  part is appended as ``{"type": "image", "data": ...}`` to the preceding user
  turn (string content is promoted to a block list first) or opens an
  image-only user turn.
- Reasoning family: one user turn holding every text part joined by newlines
  plus an ``images`` list, replacing the per-part turns entirely.
- Generate endpoint: the flattened ``User: ... / Assistant: `` prompt built
  from the original parts, never from a failed chat body.

Failure semantics:
- Non-success statuses become ``ProtocolError`` carrying the HTTP status and
  the daemon's ``error`` text when present.
- Bodies that are not JSON or lack the expected text field become
  ``ProtocolError``.
- In-band ``{"error": ...}`` stream lines become ``ProtocolError``; lines that
  are not JSON are logged as ``stream.decode_error`` and skipped.
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import httpx

from ..base.errors import ErrorCode, MalformedMessage, ProtocolError
from ..base.errors_parts.classification import _HTTP_STATUS_MAP
from ..base.logging import LogContext, normalized_log_event
from ..base.models import ImagePart, MessagePart, TextPart
from ..base.utils.messages import extract_images, flatten_prompt, join_text

PROVIDER = "ollama"

CHAT_ENDPOINT = "/api/chat"
GENERATE_ENDPOINT = "/api/generate"
TAGS_ENDPOINT = "/api/tags"
SHOW_ENDPOINT = "/api/show"
VERSION_ENDPOINT = "/api/version"


def normalize_host(host: str) -> str:
    """Pin ``localhost`` to ``127.0.0.1`` and drop trailing slashes."""
    return host.strip().replace("localhost", "127.0.0.1").rstrip("/")


def build_chat_messages(parts: Sequence[MessagePart]) -> List[Dict[str, Any]]:
    """Build chat turns for ``/api/chat`` preserving part order."""
    messages: List[Dict[str, Any]] = []
    for idx, part in enumerate(parts):
        if isinstance(part, TextPart):
            messages.append({"role": "user", "content": part.value})
        elif isinstance(part, ImagePart):
            block = {"type": "image", "data": part.base64}
            last = messages[-1] if messages else None
            if last is not None and last["role"] == "user":
                if isinstance(last["content"], str):
                    last["content"] = [{"type": "text", "text": last["content"]}]
                last["content"].append(block)
            else:
                messages.append({"role": "user", "content": [block]})
        else:
            raise MalformedMessage(f"part {idx} is neither text nor image: {type(part).__name__}", PROVIDER)
    return messages


def build_reasoning_messages(parts: Sequence[MessagePart]) -> List[Dict[str, Any]]:
    """Single user turn with joined text and a parallel ``images`` list."""
    message: Dict[str, Any] = {"role": "user", "content": join_text(parts)}
    images = extract_images(parts)
    if images:
        message["images"] = images
    return [message]


def build_chat_payload(model: str, messages: List[Dict[str, Any]], *, stream: bool) -> Dict[str, Any]:
    """Construct the JSON payload for ``/api/chat``."""
    return {"model": model, "messages": messages, "stream": stream}


def build_generate_payload(model: str, parts: Sequence[MessagePart], *, reasoning: bool) -> Dict[str, Any]:
    """Construct the non-streaming ``/api/generate`` payload from the original parts."""
    payload: Dict[str, Any] = {"model": model, "prompt": flatten_prompt(parts), "stream": False}
    if reasoning:
        images = extract_images(parts)
        if images:
            payload["images"] = images
    return payload


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip()[:200]
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return resp.text.strip()[:200]


def raise_for_status(resp: httpx.Response, *, model: Optional[str], endpoint: str) -> None:
    """Raise ``ProtocolError`` for a non-success response (body must be read)."""
    status = resp.status_code
    if status < 400:
        return
    detail = _error_detail(resp)
    message = f"{endpoint} returned status {status}"
    if detail:
        message = f"{message}: {detail}"
    raise ProtocolError(
        message,
        PROVIDER,
        model,
        code=_HTTP_STATUS_MAP.get(status, ErrorCode.PROTOCOL),
        status=status,
    )


def decode_body(resp: httpx.Response, *, model: Optional[str], endpoint: str) -> Dict[str, Any]:
    """Return the JSON object body or raise ``ProtocolError``."""
    try:
        body = resp.json()
    except ValueError as exc:
        raise ProtocolError(f"{endpoint} returned a body that is not JSON", PROVIDER, model, raw=exc) from exc
    if not isinstance(body, dict):
        raise ProtocolError(f"{endpoint} returned {type(body).__name__}, expected an object", PROVIDER, model)
    if body.get("error"):
        raise ProtocolError(f"{endpoint} reported: {body['error']}", PROVIDER, model)
    return body


def chat_text(body: Dict[str, Any], *, model: Optional[str]) -> str:
    """Extract ``message.content`` from a chat response."""
    message = body.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise ProtocolError(f"{CHAT_ENDPOINT} response carried no message content", PROVIDER, model)
    return content


def generate_text(body: Dict[str, Any], *, model: Optional[str]) -> str:
    """Extract ``response`` from a generate response."""
    text = body.get("response")
    if not isinstance(text, str):
        raise ProtocolError(f"{GENERATE_ENDPOINT} response carried no text", PROVIDER, model)
    return text


async def iter_ndjson(resp: httpx.Response, *, logger, ctx: LogContext) -> AsyncIterator[Dict[str, Any]]:
    """Yield decoded objects from a newline-delimited JSON response body."""
    async for line in resp.aiter_lines():
        if not line.strip():
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as e:
            normalized_log_event(
                logger,
                "stream.decode_error",
                ctx,
                phase="mid_stream",
                attempt=None,
                emitted=None,
                tokens=None,
                error=str(e),
                line=line[:200],
            )
            continue
        if isinstance(obj, dict):
            yield obj


def translate_stream_line(obj: Any) -> Optional[str]:
    """Map one decoded stream line to its text delta.

    Chat lines carry ``message.content``; generate lines carry ``response``.
    The closing ``done`` line usually has empty content and yields ``None``.
    """
    if not isinstance(obj, dict):
        return None
    if obj.get("error"):
        raise ProtocolError(f"stream reported: {obj['error']}", PROVIDER, obj.get("model"))
    message = obj.get("message")
    if isinstance(message, dict):
        return message.get("content") or None
    return obj.get("response") or None


__all__ = [
    "PROVIDER",
    "CHAT_ENDPOINT",
    "GENERATE_ENDPOINT",
    "TAGS_ENDPOINT",
    "SHOW_ENDPOINT",
    "VERSION_ENDPOINT",
    "normalize_host",
    "build_chat_messages",
    "build_reasoning_messages",
    "build_chat_payload",
    "build_generate_payload",
    "raise_for_status",
    "decode_body",
    "chat_text",
    "generate_text",
    "iter_ndjson",
    "translate_stream_line",
]
