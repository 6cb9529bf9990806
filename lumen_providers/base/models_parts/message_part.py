"""
Provider-agnostic message parts.

A prompt is an ordered sequence of :class:`TextPart` and :class:`ImagePart`
values. Image payloads are stored as bare base64: a ``data:`` URI prefix is
stripped at construction (its mime type is kept), so adapters never have to
guess which shape they were handed.
"""
from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ...config.defaults import DEFAULT_IMAGE_MIME_TYPE
from ..errors import MalformedMessage


@dataclass(frozen=True)
class TextPart:
    """A run of prompt text."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise MalformedMessage(f"text part value must be str, got {type(self.value).__name__}")


@dataclass(frozen=True)
class ImagePart:
    """An image attached to the prompt.

    Attributes:
        base64: Base64 payload without any data-URI scheme prefix.
        mime_type: Image media type; defaults to ``image/png`` (what the
            capture collaborator produces).
    """

    base64: str
    mime_type: str = DEFAULT_IMAGE_MIME_TYPE

    def __post_init__(self) -> None:
        if not isinstance(self.base64, str) or not self.base64.strip():
            raise MalformedMessage("image part requires a non-empty base64 payload")
        payload = self.base64.strip()
        if payload[:5].lower() == "data:":
            header, sep, data = payload.partition(",")
            if not sep or not data:
                raise MalformedMessage("image data URI carries no payload")
            mime = header[5:].split(";", 1)[0].strip()
            payload = data
            if mime:
                object.__setattr__(self, "mime_type", mime)
        object.__setattr__(self, "base64", payload)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str = DEFAULT_IMAGE_MIME_TYPE) -> "ImagePart":
        """Encode raw image bytes."""
        return cls(base64=base64.b64encode(data).decode("ascii"), mime_type=mime_type)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ImagePart":
        """Read and encode an image file; the mime type is guessed from its suffix."""
        p = Path(path)
        guessed, _ = mimetypes.guess_type(p.name)
        return cls.from_bytes(p.read_bytes(), guessed or DEFAULT_IMAGE_MIME_TYPE)

    def decoded(self) -> bytes:
        """Return the raw image bytes."""
        return base64.b64decode(self.base64)


MessagePart = Union[TextPart, ImagePart]


def build_parts(prompt: Optional[str], images: Iterable[Union[str, bytes, ImagePart]] = ()) -> List[MessagePart]:
    """Assemble the parts for a capture: the prompt text, then each image in order.

    ``images`` items may be base64 strings (with or without a data-URI prefix),
    raw bytes, or ready-made :class:`ImagePart` values. An empty prompt adds no
    text part.
    """
    parts: List[MessagePart] = []
    if prompt:
        parts.append(TextPart(prompt))
    for item in images:
        if isinstance(item, ImagePart):
            parts.append(item)
        elif isinstance(item, (bytes, bytearray)):
            parts.append(ImagePart.from_bytes(bytes(item)))
        elif isinstance(item, str):
            parts.append(ImagePart(item))
        else:
            raise MalformedMessage(f"unsupported image payload type: {type(item).__name__}")
    return parts


__all__ = ["TextPart", "ImagePart", "MessagePart", "build_parts"]
