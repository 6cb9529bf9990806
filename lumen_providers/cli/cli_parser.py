"""CLI parser construction for lumen-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ..config.defaults import SUPPORTED_PROVIDERS


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser with ``ask`` and ``verify`` subcommands.

    No I/O or network calls occur here.
    """
    p = argparse.ArgumentParser(prog="lumen-cli", description="Send prompts and images to an AI backend")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_ask = sub.add_parser("ask", help="Send a prompt (and optional images) and print the answer")
    p_ask.add_argument("--provider", choices=SUPPORTED_PROVIDERS, default=None)
    p_ask.add_argument("--model", default=None)
    p_ask.add_argument(
        "--image",
        action="append",
        default=[],
        metavar="PATH",
        help="Attach an image file; repeat for several",
    )
    p_ask.add_argument("--stream", action="store_true", help="Print chunks as they arrive")
    p_ask.add_argument("prompt", nargs="?", default="")

    p_verify = sub.add_parser("verify", help="Check that a model exists and accepts images")
    p_verify.add_argument("--provider", choices=SUPPORTED_PROVIDERS, default=None)
    p_verify.add_argument("model")

    return p


__all__ = ["build_parser"]
