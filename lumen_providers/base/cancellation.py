"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` signals cancellation across a stream handle and its
producer. Observing a cancelled token raises
:class:`~lumen_providers.base.errors.StreamAborted`, the error kind callers
treat as a deliberate user action rather than a failure.
"""

from .cancellation_parts.cancellation_token import CancellationToken
from .errors import StreamAborted

__all__ = ["CancellationToken", "StreamAborted"]
