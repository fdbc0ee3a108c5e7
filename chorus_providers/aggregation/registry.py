"""Adapter registry construction.

A registry maps each canonical model id that has a credential to one
adapter instance bound to that credential. It is built fresh for every
dispatch from a pre-resolved ``{model_id: secret}`` map and is never
mutated afterwards.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

import httpx

from ..base.factory import ProviderFactory, UnknownProviderError
from ..base.interfaces import LLMProvider
from ..base.logging import get_logger, log_event
from ..base.timeouts import TimeoutConfig

_logger = get_logger("providers.registry")


def build_registry(
    credentials: Mapping[str, Optional[str]],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[TimeoutConfig] = None,
) -> Dict[str, LLMProvider]:
    """Return one adapter per model id with a non-blank credential.

    Ids the factory does not know are skipped (and logged); the engine later
    reports them as not configured.
    """
    registry: Dict[str, LLMProvider] = {}
    for model_id, secret in credentials.items():
        key = (secret or "").strip()
        if not key:
            continue
        try:
            registry[model_id] = ProviderFactory.create(
                model_id, api_key=key, transport=transport, timeout=timeout
            )
        except UnknownProviderError as exc:
            log_event(_logger, "registry.skip", model=model_id, reason=str(exc))
    return registry


__all__ = ["build_registry"]
