"""CLI action handlers.

Purpose
-------
Subcommand handlers for ``chorus-cli``, keeping the package entrypoint a thin
presentation layer. This module has no top-level side effects and is safe to
import in tests.

External Dependencies
---------------------
- Provider adapters perform HTTP calls through ``httpx`` when ``run`` executes.
- Payload validation uses the pydantic ``DispatchRequestDTO``.

Timeout Strategy
----------------
``--timeout`` overrides the dispatch ceiling; otherwise
``get_timeout_config().dispatch_timeout_seconds`` applies. No other numeric
timeouts are introduced here.

Fallback & Error Semantics
--------------------------
- Credentials come from the environment (and ``.env``). Models without a key
  are still reported, each with a ``not_configured`` error value.
- Invalid input prints a JSON error to stderr and returns ``2``.
- Per-model failures are part of the normal output; the exit code is ``1``
  only when every requested model failed.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional, TextIO

import httpx
from pydantic import ValidationError

from ...aggregation import CapabilityRouter
from ...base.factory import ProviderFactory
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...config.credentials import resolve_credentials
from ...config.defaults import MODEL_CATALOG
from ...config.env import get_env_var_candidates
from ..dispatch import parse_payload, run_batch, run_stream


def build_payload(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate parsed ``run`` arguments into a dispatch payload mapping."""
    messages: List[Dict[str, str]] = []
    if args.system:
        messages.append({"role": "system", "content": args.system})
    messages.append({"role": "user", "content": args.prompt})
    return {
        "models": list(args.models),
        "messages": messages,
        "stream": bool(args.stream),
        "temperature": args.temperature,
        "max_output_tokens": args.max_tokens,
        "timeout_seconds": args.timeout,
    }


def plan_dispatch(models: List[str]) -> Dict[str, Any]:
    """Compute a dry-run summary of a dispatch without network I/O.

    Returns
    -------
    Dict[str, Any]
        ``{"models": [...]}`` with, per requested id, whether an adapter and a
        credential exist, the streaming capability, and the env variables
        that would supply the key.
    """
    credentials = resolve_credentials(models=models)
    router = CapabilityRouter()
    supported = set(ProviderFactory.supported())
    rows = []
    for model_id in dict.fromkeys(models):
        entry = MODEL_CATALOG.get(model_id)
        provider = entry["provider"] if entry else None
        rows.append(
            {
                "model": model_id,
                "provider": provider,
                "adapter_available": model_id in supported,
                "api_key_present": model_id in credentials,
                "capability": router.capability(model_id).value,
                "set_one_of_env": list(get_env_var_candidates(provider)) if provider else [],
            }
        )
    return {"models": rows}


async def _write_stream(lines, out: TextIO) -> bool:
    """Copy NDJSON lines to ``out``; return ``True`` when every model failed."""
    failed: set = set()
    seen: set = set()
    async for line in lines:
        out.write(line)
        out.flush()
        event = json.loads(line)
        if event.get("type") == "chunk" and event.get("done"):
            seen.add(event["model"])
            if event.get("error"):
                failed.add(event["model"])
    return bool(seen) and failed == seen


def handle_run(
    args: argparse.Namespace,
    *,
    out: Optional[TextIO] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """Execute the ``run`` subcommand.

    Parameters
    ----------
    args: argparse.Namespace
        Parsed ``run`` arguments.
    out: Optional[TextIO]
        Destination for results; defaults to ``sys.stdout``.
    transport: Optional[httpx.AsyncBaseTransport]
        httpx transport override handed to every adapter (tests).

    Returns
    -------
    int
        ``0`` when at least one model answered, ``1`` when all failed,
        ``2`` on invalid input, ``130`` when interrupted.
    """
    out = out or sys.stdout
    try:
        dto = parse_payload(build_payload(args))
    except ValidationError as e:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
        print(json.dumps({"error": "invalid request", "details": errors}), file=sys.stderr)
        return 2

    logger = get_logger("providers.cli")
    ctx = LogContext(extra={"models": dto.models, "stream": dto.stream})
    normalized_log_event(logger, "cli.start", ctx, phase="start", attempt=1, emitted=None, tokens=None)
    try:
        if dto.stream:
            all_failed = asyncio.run(_write_stream(run_stream(dto, transport=transport), out))
        else:
            results = asyncio.run(run_batch(dto, transport=transport))
            out.write(json.dumps(results, ensure_ascii=False, indent=2) + "\n")
            all_failed = all("error" in r for r in results)
    except KeyboardInterrupt:
        normalized_log_event(
            logger, "cli.error", ctx, phase="finalize", attempt=None, emitted=False, tokens=None, error="interrupted"
        )
        return 130
    normalized_log_event(
        logger, "cli.finalize", ctx, phase="finalize", attempt=None, emitted=not all_failed, tokens=None
    )
    return 1 if all_failed else 0


def handle_plan(args: argparse.Namespace, *, out: Optional[TextIO] = None) -> int:
    """Execute the ``plan`` subcommand (dry-run, no network)."""
    out = out or sys.stdout
    out.write(json.dumps(plan_dispatch(list(args.models)), indent=2) + "\n")
    return 0


def handle_models(args: argparse.Namespace, *, out: Optional[TextIO] = None) -> int:
    """Execute the ``models`` subcommand."""
    out = out or sys.stdout
    capabilities = CapabilityRouter().as_dict()
    rows = [
        {"model": model_id, "provider": entry["provider"], "capability": capabilities[model_id]}
        for model_id, entry in MODEL_CATALOG.items()
    ]
    out.write(json.dumps(rows, indent=2) + "\n")
    return 0


__all__ = ["build_payload", "plan_dispatch", "handle_run", "handle_plan", "handle_models"]
