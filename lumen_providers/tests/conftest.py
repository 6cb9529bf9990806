"""Pytest configuration for the lumen_providers test suite.

Isolates every test from the developer's environment (API keys, hosts,
config files, ``.env``) and exposes a capture fixture for the shared
``lumen`` logger, which does not propagate to the root logger.
"""

from __future__ import annotations

import json
import logging
from typing import Iterator, List

import pytest

from lumen_providers.base.logging import get_logger
from lumen_providers.config import reset_config_cache

_ISOLATED_ENV = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "OPENAI_HOST",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_HOST",
    "GEMINI_BASE_URL",
    "GOOGLE_API_KEY",
    "OLLAMA_HOST",
    "OLLAMA_MODEL",
    "OLLAMA_API_KEY",
    "OLLAMA_BASE_URL",
    "LUMEN_CONFIG_FILE",
    "LUMEN_LOG_LEVEL",
    "LUMEN_TIMEOUT_LISTING_SECONDS",
    "LUMEN_TIMEOUT_GENERATION_SECONDS",
    "LUMEN_TIMEOUT_REASONING_SECONDS",
    "LUMEN_TIMEOUT_STREAM_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear backend variables and point the dotenv loader at a missing file."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class _ListHandler(logging.Handler):
    """Collect decoded JSON log payloads."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: List[dict] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            payload = {"event": None, "message": record.getMessage()}
        self.events.append(payload)


@pytest.fixture()
def log_events() -> Iterator[List[dict]]:
    """Payloads of every event logged under ``lumen`` during the test."""
    base = get_logger()
    handler = _ListHandler()
    base.addHandler(handler)
    try:
        yield handler.events
    finally:
        base.removeHandler(handler)
