"""Per-dispatch credential resolution.

Credentials for a dispatch come from three places, in precedence order:

1. keys supplied with the request (``request_keys``),
2. keys the caller has stored for the user (``stored_keys``),
3. operator-level environment defaults (``OPENAI_API_KEY`` ...).

All maps are keyed by canonical model id. Values are trimmed; blank,
placeholder and masked values (``sk-****abcd``) are treated as absent so a
redisplayed key never shadows a real one further down the chain.

Resolution happens outside the aggregation core: the engine only ever sees
the final ``{model_id: secret}`` map.
"""
from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from . import _load_dotenv_once
from .defaults import MODEL_CATALOG
from .env import is_placeholder, resolve_provider_key


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or is_placeholder(text):
        return None
    return text


def resolve_credentials(
    request_keys: Optional[Mapping[str, Optional[str]]] = None,
    stored_keys: Optional[Mapping[str, Optional[str]]] = None,
    *,
    use_environment: bool = True,
    models: Optional[Iterable[str]] = None,
) -> Dict[str, str]:
    """Return the effective ``{model_id: secret}`` map for one dispatch.

    Parameters
    ----------
    request_keys:
        Keys sent with the request; highest precedence.
    stored_keys:
        Keys persisted for the caller.
    use_environment:
        Fall back to operator environment keys for models still missing one.
    models:
        Canonical ids to resolve; defaults to every catalogued model plus any
        id present in the supplied maps.

    Returns
    -------
    Dict[str, str]
        Only models with a usable credential appear in the result.
    """
    request_keys = request_keys or {}
    stored_keys = stored_keys or {}
    if models is None:
        wanted = list(MODEL_CATALOG)
        for source in (request_keys, stored_keys):
            wanted.extend(m for m in source if m not in wanted)
    else:
        wanted = list(dict.fromkeys(models))

    if use_environment:
        _load_dotenv_once()
    resolved: Dict[str, str] = {}
    for model_id in wanted:
        key = _clean(request_keys.get(model_id)) or _clean(stored_keys.get(model_id))
        if key is None and use_environment:
            entry = MODEL_CATALOG.get(model_id)
            if entry is not None:
                key, _ = resolve_provider_key(entry["provider"])
        if key:
            resolved[model_id] = key
    return resolved


__all__ = ["resolve_credentials"]
