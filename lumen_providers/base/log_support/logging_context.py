"""Structured logging context object for providers.

:class:`LogContext` carries the fields common to every event of one call
(backend, model, request id, endpoint) and flattens them for log payloads.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for provider logging events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    endpoint: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}

    def for_endpoint(self, endpoint: str) -> "LogContext":
        """Return a copy tagged with ``endpoint`` (e.g. ``/api/generate``)."""
        return replace(self, endpoint=endpoint, extra=dict(self.extra))


__all__ = ["LogContext"]
