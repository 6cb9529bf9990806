"""Message normalization helpers shared across adapters.

Pure functions turning the provider-agnostic part sequence into the shapes
backends need. The flattened form is what single-prompt (completion-style)
endpoints receive::

    User: describe this

    User: [Image provided]

    Assistant: 

Every part contributes exactly one ``User:`` line followed by a blank-line
separator, in original order, and the cue ``Assistant: `` closes the prompt.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from ...config.defaults import ASSISTANT_CUE, IMAGE_PLACEHOLDER, USER_PREFIX
from ..errors import MalformedMessage
from ..models import ImagePart, MessagePart, TextPart


def _checked(parts: Iterable[object]) -> List[MessagePart]:
    """Materialize ``parts``, rejecting empty input and unknown part types."""
    out: List[MessagePart] = []
    for idx, part in enumerate(parts):
        if not isinstance(part, (TextPart, ImagePart)):
            raise MalformedMessage(f"part {idx} is neither text nor image: {type(part).__name__}")
        out.append(part)
    if not out:
        raise MalformedMessage("cannot normalize an empty part sequence")
    return out


def flatten_prompt(parts: Sequence[MessagePart]) -> str:
    """Flatten parts into one prompt string for completion-style endpoints."""
    segments: List[str] = []
    for part in _checked(parts):
        if isinstance(part, TextPart):
            segments.append(f"{USER_PREFIX}{part.value}\n\n")
        else:
            segments.append(f"{USER_PREFIX}{IMAGE_PLACEHOLDER}\n\n")
    return "".join(segments) + ASSISTANT_CUE


def join_text(parts: Sequence[MessagePart]) -> str:
    """Concatenate text parts in order, each terminated by a newline."""
    return "".join(f"{p.value}\n" for p in _checked(parts) if isinstance(p, TextPart))


def extract_images(parts: Sequence[MessagePart]) -> List[str]:
    """Return the base64 payloads of all image parts in order."""
    return [p.base64 for p in _checked(parts) if isinstance(p, ImagePart)]


def image_data_uri(part: ImagePart) -> str:
    """Rebuild a ``data:`` URI for backends that take images as URLs."""
    return f"data:{part.mime_type};base64,{part.base64}"


__all__ = ["flatten_prompt", "join_text", "extract_images", "image_data_uri"]
