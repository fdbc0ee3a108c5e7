"""
NDJSON encoding of aggregated stream chunks.

Purpose
-------
Turn the engine's merged ``StreamChunk`` sequence into newline-delimited JSON
so a caller can forward it over any byte transport (HTTP body, stdout).

Each chunk becomes one line of the form::

    {"type": "chunk", "model": "gpt-5", "content": "Hel", "done": false}

and the stream always finishes with ``{"type": "end"}``. Terminal chunks keep
their ``usage``/``error``/``error_code`` keys when set.

Fallback semantics
------------------
If the chunk source raises, a final ``{"type": "error", "error": ...}`` line
is emitted before the ``end`` line so consumers can terminate cleanly.
Cancellation propagates unchanged.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator, Dict

from ..base.errors import classify_exception
from ..base.logging import get_logger, log_event
from ..base.models import StreamChunk

_logger = get_logger("providers.service")


def encode_line(event: Dict[str, Any]) -> str:
    """Serialize one event as a compact JSON line (trailing newline included)."""
    return json.dumps(event, ensure_ascii=False, separators=(",", ":")) + "\n"


def chunk_event(chunk: StreamChunk) -> Dict[str, Any]:
    return {"type": "chunk", **chunk.to_dict()}


async def iter_ndjson(chunks: AsyncIterator[StreamChunk]) -> AsyncIterator[str]:
    """Yield one NDJSON line per chunk, then the ``end`` marker."""
    try:
        async for chunk in chunks:
            yield encode_line(chunk_event(chunk))
    except asyncio.CancelledError:
        raise
    except Exception as e:  # noqa: BLE001 - surfaced as an error line
        code = classify_exception(e)
        log_event(_logger, "service.stream_error", error=str(e), error_code=code.value)
        yield encode_line({"type": "error", "error": str(e), "error_code": code.value})
    yield encode_line({"type": "end"})


__all__ = ["encode_line", "chunk_event", "iter_ndjson"]
