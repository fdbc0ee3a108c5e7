"""SupportsStreaming Protocol (single-class module).

Capability marker for providers that can stream incremental deltas.
"""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from ..models import ChatRequest, StreamChunk


@runtime_checkable
class SupportsStreaming(Protocol):
    """Capability marker for providers that can stream incremental deltas.

    Implementations yield zero or more delta chunks (``done=False``) then
    exactly one terminal chunk (``done=True``). On error, the terminal chunk
    carries ``error``. Each call returns a fresh async generator.
    """

    def supports_streaming(self) -> bool:  # pragma: no cover - trivial
        """Return True if the provider can stream under current configuration."""
        return True

    def stream(self, request: ChatRequest) -> AsyncIterator[StreamChunk]:  # pragma: no cover - interface
        """Stream chat responses as incremental chunks."""
        ...
