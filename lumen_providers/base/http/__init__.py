"""HTTP helpers for adapters talking to backends without an SDK."""

from .client import USER_AGENT, build_async_client

__all__ = ["build_async_client", "USER_AGENT"]
