"""lumen_providers.config.defaults
===============================

Central place for small, stable default values used across the
lumen_providers package. These defaults can be overridden via environment
variables or the external configuration file, but provide sensible fallbacks
for local development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep adapters free of magic literals (generation limits, sampling knobs,
  family tokens) so they can be tuned in one place.

This module intentionally avoids importing from other provider packages to
prevent circular dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- Registry ----
# Backend selected by a fresh registry when none is specified.
DEFAULT_PROVIDER = "openai"
SUPPORTED_PROVIDERS = ("openai", "gemini", "ollama")


# ---- Hosted backend A (chat-completions style) ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
# Completion budget sent as ``max_tokens`` when the caller omits it.
OPENAI_DEFAULT_MAX_TOKENS = 5000


# ---- Hosted backend B (generate-content style) ----
GEMINI_DEFAULT_MODEL = "gemini-1.5-flash"
GEMINI_DEFAULT_MAX_TOKENS = 8192
GEMINI_DEFAULT_TEMPERATURE = 0.4
GEMINI_DEFAULT_TOP_P = 0.95
GEMINI_DEFAULT_TOP_K = 40


# ---- Local backend (Ollama daemon) ----
OLLAMA_DEFAULT_MODEL = "llava:latest"
# The daemon binds the IPv4 loopback only.
OLLAMA_DEFAULT_HOST = "http://127.0.0.1:11434"


# ---- Capability table ----
# Case-insensitive substrings identifying model families that accept images.
MULTIMODAL_FAMILY_TOKENS = (
    "llava",
    "bakllava",
    "moondream",
    "deepseek-vision",
    "deepseek-r1",
)
# Reasoning-oriented multimodal family using the ``images`` side channel.
REASONING_FAMILY_TOKENS = ("deepseek-r1",)
# Maximum number of suggested models attached to a failed verification.
SUGGESTION_LIMIT = 5


# ---- Message flattening ----
IMAGE_PLACEHOLDER = "[Image provided]"
USER_PREFIX = "User: "
ASSISTANT_CUE = "Assistant: "
DEFAULT_IMAGE_MIME_TYPE = "image/png"


__all__ = [
    "DEFAULT_PROVIDER",
    "SUPPORTED_PROVIDERS",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_MAX_TOKENS",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_MAX_TOKENS",
    "GEMINI_DEFAULT_TEMPERATURE",
    "GEMINI_DEFAULT_TOP_P",
    "GEMINI_DEFAULT_TOP_K",
    "OLLAMA_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_HOST",
    "MULTIMODAL_FAMILY_TOKENS",
    "REASONING_FAMILY_TOKENS",
    "SUGGESTION_LIMIT",
    "IMAGE_PLACEHOLDER",
    "USER_PREFIX",
    "ASSISTANT_CUE",
    "DEFAULT_IMAGE_MIME_TYPE",
]
