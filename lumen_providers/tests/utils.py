"""Shared fakes for adapter tests.

``FakeOllama`` answers the local daemon endpoints through
``httpx.MockTransport`` so the Ollama adapter runs its real HTTP code without
a network. Failure modes are switched per endpoint.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

import httpx

PNG_B64 = "iVBORw0KGgo="


def ndjson(*objs: Any) -> List[str]:
    return [json.dumps(o) for o in objs]


def chat_lines(*pieces: str) -> List[str]:
    """Streaming chat body: one line per piece, then the ``done`` line."""
    lines = [{"message": {"role": "assistant", "content": p}, "done": False} for p in pieces]
    lines.append({"message": {"role": "assistant", "content": ""}, "done": True})
    return ndjson(*lines)


class FakeOllama:
    """In-memory Ollama daemon.

    Attributes set by tests:
        models: names reported by ``/api/tags`` (discovery order).
        show: model name -> ``/api/show`` body.
        chat_status / generate_status / show_status / tags_status: HTTP status.
        chat_text / generate_text: single-shot answers.
        stream_lines: NDJSON body lines of a streaming chat answer.
        connect_error / timeout_error: raise the transport error for every request.
    """

    def __init__(self, models: Sequence[str] = ("llava:7b", "mistral:7b")) -> None:
        self.models: List[str] = list(models)
        self.show: Dict[str, Dict[str, Any]] = {}
        self.chat_status = 200
        self.generate_status = 200
        self.show_status = 200
        self.tags_status = 200
        self.chat_text = "chat answer"
        self.generate_text = "generate answer"
        self.stream_lines: List[str] = chat_lines("Hel", "lo")
        self.version = "0.5.7"
        self.connect_error = False
        self.timeout_error = False
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def bodies(self, path: str) -> List[Dict[str, Any]]:
        """Decoded JSON bodies of the requests sent to ``path``."""
        return [json.loads(r.content) for r in self.requests if r.url.path == path]

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)
        if self.timeout_error:
            raise httpx.ConnectTimeout("timed out", request=request)
        path = request.url.path
        if path == "/api/tags":
            if self.tags_status != 200:
                return httpx.Response(self.tags_status, text="boom")
            return httpx.Response(200, json={"models": [{"name": m, "size": 1} for m in self.models]})
        if path == "/api/show":
            if self.show_status != 200:
                return httpx.Response(self.show_status, json={"error": "show failed"})
            name = request.url.params.get("name")
            return httpx.Response(200, json=self.show.get(name, {"details": {}}))
        if path == "/api/version":
            return httpx.Response(200, json={"version": self.version})
        body = json.loads(request.content)
        if path == "/api/chat":
            if self.chat_status != 200:
                return httpx.Response(self.chat_status, json={"error": "chat failed"})
            if body.get("stream"):
                return httpx.Response(200, content=("\n".join(self.stream_lines) + "\n").encode("utf-8"))
            return httpx.Response(200, json={"message": {"role": "assistant", "content": self.chat_text}, "done": True})
        if path == "/api/generate":
            if self.generate_status != 200:
                return httpx.Response(self.generate_status, json={"error": "generate failed"})
            return httpx.Response(200, json={"response": self.generate_text, "done": True})
        return httpx.Response(404, json={"error": f"unknown path {path}"})


class FakeAsyncStream:
    """Async iterator over canned SDK chunks with an awaitable ``close``."""

    def __init__(self, chunks: Sequence[Any], error: Optional[BaseException] = None) -> None:
        self._chunks = list(chunks)
        self._error = error
        self.closed = False

    def __aiter__(self) -> "FakeAsyncStream":
        return self

    async def __anext__(self) -> Any:
        if self._chunks:
            return self._chunks.pop(0)
        if self._error is not None:
            err, self._error = self._error, None
            raise err
        raise StopAsyncIteration

    async def close(self) -> None:
        self.closed = True
