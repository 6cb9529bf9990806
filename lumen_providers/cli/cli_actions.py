"""CLI action handlers.

Purpose
-------
Subcommand handlers for ``lumen-cli``. Each handler builds a request from the
parsed arguments, runs it through a :class:`ProviderRegistry` and prints the
result, keeping the entrypoint thin. Importing this module has no side
effects.

Error Semantics
---------------
- Generation errors are printed as JSON to stderr with exit code ``1``.
- Bad input (no prompt and no image, unreadable image file) exits with ``2``.
- A failed verification prints its result as JSON and exits with ``1``.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import List, Optional, TextIO

from ..base.errors import MalformedMessage, ProviderError
from ..base.factory import UnknownProviderError
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import Completion, GenerationRequest, ImagePart, MessagePart, build_parts
from ..base.registry import ProviderRegistry
from ..base.streaming import StreamChunk, StreamError

_logger = get_logger("cli")


def _print_error(payload: dict, stream: TextIO) -> None:
    print(json.dumps(payload), file=stream)


def load_parts(prompt: str, image_paths: List[str]) -> List[MessagePart]:
    """Build parts from the prompt text and image files (raises ``OSError`` on unreadable files)."""
    return build_parts(prompt, [ImagePart.from_file(path) for path in image_paths])


async def handle_ask(
    args: argparse.Namespace,
    registry: ProviderRegistry,
    *,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Execute the ``ask`` subcommand.

    Returns
    -------
    int
        ``0`` on success, ``1`` on a backend failure, ``2`` on invalid input.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        request = GenerationRequest(
            load_parts(args.prompt, args.image),
            model=args.model,
            streaming=bool(args.stream),
        )
    except (OSError, MalformedMessage) as e:
        _print_error({"error": str(e)}, err)
        return 2

    provider: Optional[str] = args.provider
    ctx = LogContext(provider=provider or registry.selected, model=args.model)
    normalized_log_event(_logger, "cli.start", ctx, phase="start", stream=request.streaming)
    try:
        result = await registry.generate(request, provider)
        if isinstance(result, Completion):
            print(result.text, file=out)
            return 0
        async with result:
            async for event in result:
                if isinstance(event, StreamChunk):
                    out.write(event.text)
                    out.flush()
                elif isinstance(event, StreamError):
                    raise event.cause
        print(file=out)
        return 0
    except (ProviderError, UnknownProviderError) as e:
        code = e.code.value if isinstance(e, ProviderError) else "validation"
        normalized_log_event(_logger, "cli.error", ctx, phase="finalize", error_code=code, error=str(e))
        _print_error({"error": str(e), "code": code}, err)
        return 1


async def handle_verify(
    args: argparse.Namespace,
    registry: ProviderRegistry,
    *,
    out: Optional[TextIO] = None,
) -> int:
    """Execute the ``verify`` subcommand; prints the verification as JSON."""
    out = out or sys.stdout
    result = await registry.verify_model(args.model, args.provider)
    print(json.dumps(dataclasses.asdict(result)), file=out)
    return 0 if result.exists else 1


__all__ = ["handle_ask", "handle_verify", "load_parts"]
