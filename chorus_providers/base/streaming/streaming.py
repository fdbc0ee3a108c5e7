"""Helpers over sequences of ``StreamChunk``."""

from __future__ import annotations

from typing import Dict, Iterable, List

from ..models import ChatResult, StreamChunk


def accumulate_chunks(chunks: Iterable[StreamChunk]) -> ChatResult:
    """Fold one model's chunk sequence into the equivalent ``ChatResult``.

    - Concatenates text deltas in order.
    - Usage is taken from the last chunk that carries it.
    - An error chunk yields an error result with empty content.
    """
    chunk_list: List[StreamChunk] = list(chunks)
    if not chunk_list:
        return ChatResult(model="unknown")
    model = chunk_list[0].model
    if error_chunk := next((c for c in chunk_list if c.error is not None), None):
        return ChatResult.failure(model, error_chunk.error or "", error_chunk.error_code)
    usage = next((c.usage for c in reversed(chunk_list) if c.usage is not None), None)
    return ChatResult(model=model, content="".join(c.content for c in chunk_list), usage=usage)


def group_by_model(chunks: Iterable[StreamChunk]) -> Dict[str, List[StreamChunk]]:
    """Split an interleaved multi-model stream into per-model sequences."""
    grouped: Dict[str, List[StreamChunk]] = {}
    for chunk in chunks:
        grouped.setdefault(chunk.model, []).append(chunk)
    return grouped


__all__ = [
    "accumulate_chunks",
    "group_by_model",
]
