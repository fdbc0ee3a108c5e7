"""CLI parser construction for chorus-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from ...config.defaults import CLI_DEFAULT_MODELS


def _str2bool(v: str | None) -> bool:
    """Best-effort conversion of common truthy/falsey strings to bool.

    ``None`` (flag given without a value) maps to ``True``.
    """
    if v is None:
        return True
    val = v.strip().lower()
    if val in {"1", "t", "true", "y", "yes", "on"}:
        return True
    return False if val in {"0", "f", "false", "n", "no", "off"} else bool(val)


def _positive_float(v: str) -> float:
    try:
        val = float(v)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid number: {v!r}") from e
    if val <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return val


def add_stream_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--stream``/``--no-stream`` flags to a parser.

    ``--stream`` accepts an optional boolean (``--stream``, ``--stream false``);
    ``--no-stream`` is the explicit negation.
    """
    grp = parser.add_mutually_exclusive_group()
    grp.add_argument("--stream", nargs="?", const=True, type=_str2bool, default=False)
    grp.add_argument("--no-stream", dest="stream", action="store_false")


def add_model_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--models",
        nargs="+",
        default=list(CLI_DEFAULT_MODELS),
        help="Canonical model ids to query (default: every catalogued model)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser with ``run``, ``plan`` and ``models`` subcommands.
        No I/O or network calls occur here.
    """
    p = argparse.ArgumentParser(
        prog="chorus-cli", description="Send one prompt to several models and print every answer"
    )
    sub = p.add_subparsers(dest="cmd")

    # run
    p_run = sub.add_parser("run", help="Dispatch a prompt to the selected models (default)")
    p_run.add_argument("prompt", help="User prompt text")
    add_model_flags(p_run)
    p_run.add_argument("--system", default=None, help="Optional system prompt")
    add_stream_flags(p_run)
    p_run.add_argument("--timeout", type=_positive_float, default=None, help="Dispatch ceiling in seconds")
    p_run.add_argument("--temperature", type=float, default=None)
    p_run.add_argument("--max-tokens", dest="max_tokens", type=int, default=None)

    # plan (dry-run)
    p_plan = sub.add_parser("plan", help="Show which models would stream, batch or be skipped (no network)")
    add_model_flags(p_plan)

    # models
    sub.add_parser("models", help="List the model catalog")

    return p


__all__ = ["build_parser", "add_stream_flags", "add_model_flags"]
