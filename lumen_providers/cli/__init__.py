"""Lumen debugging CLI (package entrypoint).

Wires argument parsing to the action handlers in ``cli_actions``; performs no
provider logic directly.

Usage::

    python -m lumen_providers.cli ask --provider ollama --image shot.png "What is on screen?"
    python -m lumen_providers.cli verify --provider ollama llava:7b
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

from ..base.registry import ProviderRegistry
from .cli_actions import handle_ask, handle_verify
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None, registry: Optional[ProviderRegistry] = None) -> int:
	"""CLI entrypoint.

	Parameters
	----------
	argv: Optional[list[str]]
		Argument vector; when ``None`` uses ``sys.argv[1:]``.
	registry: Optional[ProviderRegistry]
		Registry to dispatch through; a fresh one is created when omitted.

	Returns
	-------
	int
		Process exit code (0 success, non-zero on error).
	"""
	args = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
	reg = registry or ProviderRegistry()
	if args.cmd == "verify":
		return asyncio.run(handle_verify(args, reg))
	return asyncio.run(handle_ask(args, reg))


if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())
