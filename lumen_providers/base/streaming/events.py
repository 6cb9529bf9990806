"""Streaming event primitives.

A stream emits zero or more :class:`StreamChunk` events followed by exactly
one terminal event: :class:`StreamEnd` carrying the accumulated text, or
:class:`StreamError` carrying the cause. Concatenating every chunk's ``text``
in emission order equals ``StreamEnd.final_text``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from ..errors import ProviderError


@dataclass(frozen=True)
class StreamChunk:
    """One incremental piece of generated text."""

    text: str
    is_terminal: ClassVar[bool] = False


@dataclass(frozen=True)
class StreamEnd:
    """Normal completion; ``final_text`` is the whole answer."""

    final_text: str
    is_terminal: ClassVar[bool] = True


@dataclass(frozen=True)
class StreamError:
    """Abnormal completion; partial text already delivered is not repeated."""

    cause: ProviderError
    is_terminal: ClassVar[bool] = True


StreamEvent = Union[StreamChunk, StreamEnd, StreamError]


__all__ = ["StreamChunk", "StreamEnd", "StreamError", "StreamEvent"]
