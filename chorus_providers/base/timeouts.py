"""Unified timeout configuration for providers and dispatches.

Key Components
--------------
TimeoutConfig
    Frozen dataclass with the normalized timeout values.

get_timeout_config()
    Returns a process-cached configuration. Environment overrides are read
    on first use and re-read only when one of the variables changes:
        CHORUS_TIMEOUT_CONNECT_SECONDS
        CHORUS_TIMEOUT_READ_SECONDS
        CHORUS_DISPATCH_TIMEOUT_SECONDS

build_httpx_timeout()
    Translates the config into an ``httpx.Timeout`` for provider clients.

The dispatch ceiling is enforced by the aggregation supervisor; the httpx
timeouts only bound individual connects and idle reads.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

import httpx

from .constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_DISPATCH_TIMEOUT_SECONDS,
    DEFAULT_READ_TIMEOUT_SECONDS,
)

_ENV_NAMES = (
    "CHORUS_TIMEOUT_CONNECT_SECONDS",
    "CHORUS_TIMEOUT_READ_SECONDS",
    "CHORUS_DISPATCH_TIMEOUT_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Bound on establishing a provider connection.
        read_timeout_seconds: Bound on waiting for the next bytes of a
            response (idle timeout while streaming).
        dispatch_timeout_seconds: Wall-clock ceiling of one dispatch,
            measured from dispatch start.
    """

    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    read_timeout_seconds: float = DEFAULT_READ_TIMEOUT_SECONDS
    dispatch_timeout_seconds: float = DEFAULT_DISPATCH_TIMEOUT_SECONDS


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from ``name``; fall back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
        return val if val > 0 else default
    except ValueError:
        return default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached ``TimeoutConfig`` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], DEFAULT_CONNECT_TIMEOUT_SECONDS),
        read_timeout_seconds=_parse_env_float(_ENV_NAMES[1], DEFAULT_READ_TIMEOUT_SECONDS),
        dispatch_timeout_seconds=_parse_env_float(_ENV_NAMES[2], DEFAULT_DISPATCH_TIMEOUT_SECONDS),
    )
    _ENV_GUARD = guard
    return _CACHED


def build_httpx_timeout(cfg: Optional[TimeoutConfig] = None) -> httpx.Timeout:
    """Return the ``httpx.Timeout`` used by provider clients."""
    cfg = cfg or get_timeout_config()
    return httpx.Timeout(cfg.read_timeout_seconds, connect=cfg.connect_timeout_seconds)


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "build_httpx_timeout",
]
