"""Initialization dataclass for HTTP provider adapters.

Encapsulates the constructor parameters shared by ``BaseHTTPProvider``
subclasses, plus the helper that fills them from provider configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from ...config import get_provider_config
from ..timeouts import TimeoutConfig


@dataclass(frozen=True)
class _ProviderInit:
    """Initialization bundle for ``BaseHTTPProvider``.

    Attributes:
        api_key: Credential sent with every request.
        model_id: Canonical model id the adapter is bound to (``"gpt-5"``).
        wire_model: Model name sent to the provider API (``"gpt-4o"``).
        base_url: Provider API root.
        logger_name: Structured logger name (e.g., ``providers.openai``).
        streaming_enabled: Whether streaming is enabled by configuration.
        transport: Optional httpx transport override (tests).
        timeout: Optional explicit timeout configuration.
    """

    api_key: Optional[str]
    model_id: str
    wire_model: str
    base_url: str
    logger_name: str
    streaming_enabled: bool = True
    transport: Optional[httpx.AsyncBaseTransport] = None
    timeout: Optional[TimeoutConfig] = None


def provider_init_from_config(
    provider: str,
    *,
    model_id: str,
    api_key: Optional[str],
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    streaming: Optional[bool] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[TimeoutConfig] = None,
) -> _ProviderInit:
    """Resolve an init bundle from explicit arguments and provider config.

    Explicit arguments win over ``get_provider_config(provider)`` values.
    """
    cfg = get_provider_config(provider)
    return _ProviderInit(
        api_key=api_key if api_key is not None else cfg.get("api_key"),
        model_id=model_id,
        wire_model=model or cfg["model"],
        base_url=base_url or cfg["base_url"],
        logger_name=f"providers.{provider}",
        streaming_enabled=cfg.get("streaming", True) if streaming is None else streaming,
        transport=transport,
        timeout=timeout,
    )


__all__ = ["_ProviderInit", "provider_init_from_config"]
