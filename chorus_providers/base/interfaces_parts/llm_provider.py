"""LLMProvider Protocol (single-class module).

Defines the minimal chat interface contract for provider adapters.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import ChatRequest, ChatResult


@runtime_checkable
class LLMProvider(Protocol):
    """Minimal interface for Large Language Model providers.

    Implementations map ``ChatRequest`` fields to their HTTP payload,
    normalize responses to ``ChatResult`` and never leak raw provider
    objects upstream.
    """

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g., ``"openai"`` or ``"anthropic"``."""
        ...

    @property
    def model(self) -> str:
        """Canonical model id this adapter instance is bound to."""
        ...

    async def generate(self, request: ChatRequest) -> ChatResult:
        """Execute a single non-streaming chat request.

        Failure handling: never raise for provider or transport failures;
        return a ``ChatResult`` with ``error`` populated instead.
        """
        ...
