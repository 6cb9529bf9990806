"""Layered configuration for backend adapters.

Merge order (later wins)
------------------------
1. Built-in defaults (``config.defaults``)
2. Optional external config file (JSON or YAML) named by ``LUMEN_CONFIG_FILE``
3. Environment variables (``<PROVIDER>_MODEL``, ``<PROVIDER>_API_KEY``,
   ``<PROVIDER>_HOST``, ``<PROVIDER>_BASE_URL``)
4. In-code overrides passed to :func:`get_provider_config`

A ``.env`` file (path from ``DOTENV_FILE``, default ``.env``) is loaded once
before the first lookup; it only fills variables that are unset or hold
placeholder values.

External config file example::

    openai:
      model: gpt-4o-mini
    ollama:
      host: http://127.0.0.1:11434
      model: llava:13b

Public API
----------
* get_provider_config(provider, overrides=None) -> dict
* get_model(provider) -> str | None
* reset_config_cache()
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    GEMINI_DEFAULT_MODEL,
    OLLAMA_DEFAULT_HOST,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_MODEL,
)
from .env import is_placeholder, resolve_provider_key


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL},
    "gemini": {"model": GEMINI_DEFAULT_MODEL},
    "ollama": {"model": OLLAMA_DEFAULT_MODEL, "host": OLLAMA_DEFAULT_HOST},
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "host": "HOST",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Parse ``KEY=VALUE`` lines from the dotenv file into ``os.environ`` once."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _parse_config_text(text: str) -> Dict[str, Any]:
    """Decode a config document as JSON, falling back to YAML."""
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("LUMEN_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    _FILE_CACHE = _parse_config_text(Path(path).read_text(encoding="utf-8"))
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a backend.

    ``None`` values in ``overrides`` are ignored so callers can forward
    optional constructor arguments directly. Placeholder API keys are dropped
    from the result, leaving ``api_key`` absent.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    # Alias variables (GOOGLE_API_KEY) only when the canonical one is absent.
    if not cfg.get("api_key") or is_placeholder(cfg.get("api_key")):
        key, _ = resolve_provider_key(name)
        if key:
            cfg["api_key"] = key

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    if is_placeholder(cfg.get("api_key")) or cfg.get("api_key") == "":
        cfg.pop("api_key", None)
    return cfg


def get_model(provider: str) -> Optional[str]:
    """Return the configured default model for ``provider``."""
    return get_provider_config(provider).get("model")


def reset_config_cache() -> None:
    """Forget the cached config file and dotenv state (tests and reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


__all__ = ["get_provider_config", "get_model", "reset_config_cache", "DEFAULTS"]
