"""chorus_providers.config.env
===========================

Centralized environment variable mapping and helpers for provider credentials.

Purpose
-------
- Provide a single source of truth for mapping provider identifiers to their
  corresponding environment variable names (canonical and aliases).
- Offer small utilities to look up provider API keys consistently.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Gemini accepts several names
  (``GOOGLE_AI_API_KEY`` is the name deployments of the aggregation service
  historically used); aliases are listed in ``ENV_ALIASES`` with the
  canonical name first.
- Helpers never raise on unknown providers or unset variables.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "xai": "XAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
}


# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_AI_API_KEY", "GOOGLE_API_KEY"),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example", "your-api-key", "your_api_key")
_MASK_CHARS = ("*", "•")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder or masked value.

    Heuristics: contains 'placeholder', 'changeme', 'example' or a
    'your-api-key' style marker, starts with 'test_', or contains masking
    characters (``*`` or a bullet) as produced by UIs that redisplay a stored
    key (``sk-****abcd``). The check is case-insensitive.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        any(marker in v for marker in _PLACEHOLDER_MARKERS)
        or v.startswith("test_")
        or any(ch in v for ch in _MASK_CHARS)
    )


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a provider."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a provider, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):  # pragma: no branch - small tuples
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a provider from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        candidate; ``(None, None)`` when nothing usable is set.
    """
    for name in get_env_var_candidates(provider):
        val = (os.environ.get(name) or "").strip()
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
