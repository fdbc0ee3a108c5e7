"""Provider Factory utilities.

Purpose
-------
Centralize creation of adapter instances implementing the ``LLMProvider``
interface, keyed by canonical model id. Adapters are imported lazily using
``importlib`` to keep side effects out of the factory layer.

Timeout and fallback semantics
------------------------------
- No timeouts are introduced here. The factory performs no retries or
  fallbacks; it either returns an instance or raises a clear error.

Scope
-----
Supported model ids: ``gpt-5``, ``claude-4``, ``gemini-2.5-pro``, ``grok-4``
and ``deepseek``.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type


class UnknownProviderError(Exception):
    """Raised when a model id cannot be resolved to an adapter.

    Failure modes include:
    - The model id is not registered in the factory mapping.
    - The adapter module cannot be imported or the adapter class is missing.
    - The adapter constructor rejected its arguments.
    """


def create_provider(model_id: str, **kwargs: Any) -> Any:
    """Compatibility helper that delegates to :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(model_id, **kwargs)


class ProviderFactory:
    """Create provider adapters for canonical model ids (e.g., ``"gpt-5"``)."""

    # Map canonical model ids to import paths and class names
    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "gpt-5": {"module": "chorus_providers.openai.client", "class": "OpenAIProvider"},
        "claude-4": {"module": "chorus_providers.anthropic.client", "class": "AnthropicProvider"},
        "gemini-2.5-pro": {"module": "chorus_providers.gemini.client", "class": "GeminiProvider"},
        "grok-4": {"module": "chorus_providers.xai.client", "class": "XAIProvider"},
        "deepseek": {"module": "chorus_providers.deepseek.client", "class": "DeepseekProvider"},
    }

    @classmethod
    def create(cls, model_id: str, **kwargs: Any) -> Any:
        """Create the adapter bound to ``model_id``.

        Parameters
        ----------
        model_id:
            Canonical model id (e.g., ``"claude-4"``).
        **kwargs:
            Adapter constructor kwargs (``api_key``, ``transport``, ...).

        Raises
        ------
        UnknownProviderError
            If the id is unknown, the adapter module fails to import, the
            adapter class is missing, or the constructor rejects its arguments.
        """
        key = (model_id or "").strip()
        spec = cls._PROVIDERS.get(key)
        if not spec:
            raise UnknownProviderError(f"Unknown model '{model_id}'")

        module_path, class_name = spec["module"], spec["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for model '{model_id}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for model '{model_id}'"
            ) from exc

        try:
            return klass(model_id=key, **kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{model_id}' adapter constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported canonical model ids in deterministic order."""
        return tuple(cls._PROVIDERS.keys())


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
