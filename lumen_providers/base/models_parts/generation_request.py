"""
Immutable generation request DTO.

``GenerationRequest`` is what callers hand to ``generate``: the ordered parts,
the target model, the response contract (single-shot or streaming) and the
optional sampling knobs. Backends that do not expose a knob ignore it.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from ..errors import MalformedMessage
from .message_part import ImagePart, MessagePart, TextPart


@dataclass(frozen=True)
class GenerationRequest:
    """A provider-agnostic generation request.

    Attributes:
        parts: Ordered text/image parts; order is preserved end-to-end.
        model: Target model; ``None`` selects the adapter's default model.
        streaming: Request incremental delivery instead of a complete answer.
        max_tokens: Completion budget; backend default when omitted.
        temperature: Sampling temperature (style-B backend only).
        top_p: Nucleus sampling mass (style-B backend only).
        top_k: Top-k sampling cutoff (style-B backend only).
    """

    parts: Sequence[MessagePart]
    model: Optional[str] = None
    streaming: bool = False
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.parts, (str, bytes)):
            raise MalformedMessage("parts must be a sequence of TextPart/ImagePart, not a string")
        parts: Tuple[MessagePart, ...] = tuple(self.parts)
        if not parts:
            raise MalformedMessage("a generation request needs at least one message part")
        for idx, part in enumerate(parts):
            if not isinstance(part, (TextPart, ImagePart)):
                raise MalformedMessage(f"part {idx} is neither text nor image: {type(part).__name__}")
        object.__setattr__(self, "parts", parts)

    @property
    def has_images(self) -> bool:
        return any(isinstance(p, ImagePart) for p in self.parts)

    def with_model(self, model: str) -> "GenerationRequest":
        """Return a copy targeting ``model``."""
        return replace(self, model=model)


__all__ = ["GenerationRequest"]
