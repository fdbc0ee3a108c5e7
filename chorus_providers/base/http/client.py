"""Per-call async HTTP client construction for providers.

Purpose:
    Give adapters one place to build the ``httpx.AsyncClient`` they use for a
    single provider call. Timeouts derive exclusively from
    :func:`get_timeout_config` (or an explicit ``TimeoutConfig``).

Lifecycle & cleanup:
    - A client lives exactly as long as the ``async with open_client(...)``
      block. Leaving the block, normally or through cancellation, closes the
      client and every socket it opened, so a cancelled stream releases its
      connection immediately.
    - Tests inject an ``httpx.MockTransport`` through ``transport``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping, Optional

import httpx

from ..timeouts import TimeoutConfig, build_httpx_timeout


@asynccontextmanager
async def open_client(
    *,
    base_url: str,
    headers: Optional[Mapping[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[TimeoutConfig] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield an ``httpx.AsyncClient`` bound to ``base_url`` for one call.

    Parameters:
        base_url: Provider API root; request paths are relative to it.
        headers: Default headers (authentication, API version).
        transport: Optional transport override (``httpx.MockTransport`` in tests).
        timeout: Optional explicit timeout configuration.
    """
    client = httpx.AsyncClient(
        base_url=base_url,
        headers=dict(headers or {}),
        transport=transport,
        timeout=build_httpx_timeout(timeout),
    )
    try:
        yield client
    finally:
        await client.aclose()


__all__ = ["open_client"]
