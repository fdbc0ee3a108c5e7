"""chorus-cli (package entrypoint).

Wires argument parsing to the action handlers in ``cli_actions``. It performs
no provider logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import handle_models, handle_plan, handle_run
from .cli_parser import build_parser

_COMMANDS = {"run", "plan", "models"}


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code.
    """
    p = build_parser()
    argv_list = list(sys.argv[1:] if argv is None else argv)
    # Inject the default subcommand "run" when omitted.
    if argv_list and argv_list[0] not in _COMMANDS and argv_list[0] not in {"-h", "--help"}:
        argv_list = ["run"] + argv_list
    args = p.parse_args(argv_list)

    if args.cmd == "plan":
        return handle_plan(args)
    if args.cmd == "models":
        return handle_models(args)
    if args.cmd == "run":
        return handle_run(args)
    p.print_help()
    return 2


__all__ = ["main"]
