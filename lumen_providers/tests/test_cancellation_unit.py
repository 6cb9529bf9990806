"""Unit tests for cooperative cancellation primitives.

Covers idempotent cancel, callbacks and raise_if_cancelled behavior.
"""
from __future__ import annotations

import pytest

from lumen_providers.base.cancellation import CancellationToken, StreamAborted
from lumen_providers.base.errors import ErrorCode


def test_cancel_is_idempotent():
    token = CancellationToken()
    assert token.cancelled is False and token.reason is None  # nosec B101
    token.cancel(reason="stop")
    token.cancel(reason="ignored")
    assert token.cancelled is True and token.reason == "stop"  # nosec B101


def test_callbacks_fire_once_and_late_callbacks_run_immediately():
    token = CancellationToken()
    seen = []
    token.add_callback(seen.append)
    token.cancel("user")
    token.cancel("again")
    token.add_callback(seen.append)
    assert seen == ["user", "user"]  # nosec B101


def test_raise_if_cancelled_raises_stream_aborted():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("terminate")
    with pytest.raises(StreamAborted) as info:
        token.raise_if_cancelled("ollama", "llava")
    assert info.value.code is ErrorCode.CANCELLED and info.value.message == "terminate"  # nosec B101
