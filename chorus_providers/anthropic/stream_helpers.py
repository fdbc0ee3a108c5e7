"""Anthropic streaming helpers.

The Messages API streams named SSE events without a ``[DONE]`` sentinel:

``message_start``        carries the input token count.
``content_block_delta``  carries ``text_delta`` fragments.
``message_delta``        carries ``stop_reason`` and the output token count.
``message_stop``         is the terminal signal.
``error``                ends the stream with an error.
``ping`` and block start/stop events carry nothing of interest.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..base.streaming import StreamEvent, StreamMetrics
from .helpers import extract_usage


def event_type(event: StreamEvent) -> str:
    """Prefer the payload ``type``; fall back to the SSE event name."""
    data = event.data
    if isinstance(data, Mapping) and isinstance(data.get("type"), str):
        return data["type"]
    return event.name


def translate_stream_event(event: StreamEvent, metrics: StreamMetrics) -> Optional[str]:
    """Apply one event to ``metrics``; return its text delta, if any.

    Error events are left to the caller, which owns error formatting.
    """
    data: Any = event.data if isinstance(event.data, Mapping) else {}
    kind = event_type(event)
    if kind == "message_start":
        message = data.get("message") or {}
        metrics.record_usage(extract_usage(message.get("usage")))
        return None
    if kind == "content_block_delta":
        delta = data.get("delta") or {}
        if delta.get("type") == "text_delta":
            text = delta.get("text")
            return text if isinstance(text, str) else None
        return None
    if kind == "message_delta":
        delta = data.get("delta") or {}
        if delta.get("stop_reason"):
            metrics.finish_reason = delta["stop_reason"]
        metrics.record_usage(extract_usage(data.get("usage")))
        return None
    if kind == "message_stop":
        metrics.terminal = True
    return None


__all__ = ["event_type", "translate_stream_event"]
