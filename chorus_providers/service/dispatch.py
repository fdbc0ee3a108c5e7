"""
Caller-side dispatch helpers.

Purpose
-------
Tie the inbound payload, credential resolution, the aggregation engine and the
NDJSON encoder together so an outer surface (CLI, web handler) needs a single
call per request.

External dependencies
---------------------
- Pydantic for payload validation (``DispatchRequestDTO``).
- httpx indirectly through the provider adapters.

Fallback semantics
------------------
- An invalid payload raises ``pydantic.ValidationError`` before any provider
  is contacted; the caller maps it to its own error surface.
- Every per-model failure is reported in that model's result or terminal
  chunk; these helpers never raise for provider problems.

Timeout strategy
----------------
``timeout_seconds`` from the payload overrides the dispatch ceiling; otherwise
``get_timeout_config().dispatch_timeout_seconds`` applies.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Union

import httpx

from ..aggregation import AggregationEngine
from ..base.cancellation import CancellationToken
from ..base.dto import DispatchRequestDTO
from ..config.credentials import resolve_credentials
from .ndjson import iter_ndjson

Payload = Union[DispatchRequestDTO, Mapping[str, Any]]


def parse_payload(payload: Payload) -> DispatchRequestDTO:
    """Return ``payload`` as a validated ``DispatchRequestDTO``."""
    if isinstance(payload, DispatchRequestDTO):
        return payload
    return DispatchRequestDTO.model_validate(dict(payload))


def build_engine(
    dto: DispatchRequestDTO,
    *,
    stored_keys: Optional[Mapping[str, Optional[str]]] = None,
    use_environment: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AggregationEngine:
    """Resolve credentials for ``dto.models`` and construct the engine."""
    credentials = resolve_credentials(
        dto.api_keys,
        stored_keys,
        use_environment=use_environment,
        models=dto.models,
    )
    return AggregationEngine(credentials, timeout_seconds=dto.timeout_seconds, transport=transport)


async def run_batch(
    payload: Payload,
    *,
    stored_keys: Optional[Mapping[str, Optional[str]]] = None,
    use_environment: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cancellation_token: Optional[CancellationToken] = None,
) -> List[Dict[str, Any]]:
    """Run a batch dispatch and return one JSON-ready dict per requested model."""
    dto = parse_payload(payload)
    engine = build_engine(dto, stored_keys=stored_keys, use_environment=use_environment, transport=transport)
    results = await engine.dispatch_batch(
        dto.models,
        dto.to_messages(),
        temperature=dto.temperature,
        max_output_tokens=dto.max_output_tokens,
        cancellation_token=cancellation_token,
    )
    return [r.to_dict() for r in results]


def run_stream(
    payload: Payload,
    *,
    stored_keys: Optional[Mapping[str, Optional[str]]] = None,
    use_environment: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cancellation_token: Optional[CancellationToken] = None,
) -> AsyncIterator[str]:
    """Start a streaming dispatch and return its NDJSON lines.

    Validation happens eagerly; the returned iterator performs the I/O.
    """
    dto = parse_payload(payload)
    engine = build_engine(dto, stored_keys=stored_keys, use_environment=use_environment, transport=transport)
    chunks = engine.dispatch_stream(
        dto.models,
        dto.to_messages(),
        temperature=dto.temperature,
        max_output_tokens=dto.max_output_tokens,
        cancellation_token=cancellation_token,
    )
    return iter_ndjson(chunks)


__all__ = ["parse_payload", "build_engine", "run_batch", "run_stream"]
