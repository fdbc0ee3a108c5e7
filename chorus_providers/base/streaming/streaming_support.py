"""Unified helper for determining streaming capability."""
from __future__ import annotations

from typing import Callable, Optional

__all__ = ["streaming_supported"]


def streaming_supported(
    *,
    require_api_key: bool,
    api_key_getter: Callable[[], Optional[str]],
    enabled: bool = True,
) -> bool:
    """Return whether an adapter can stream under current runtime conditions.

    Streaming needs the capability to be enabled in configuration and, for
    providers that authenticate, a non-blank key.
    """
    if not enabled:
        return False
    if require_api_key:
        key = api_key_getter() or ""
        if not key.strip():
            return False
    return True
