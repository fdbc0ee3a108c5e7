"""Streaming package for the provider layer.

Exposes wire framing, per-call stream state, terminal chunk construction and
chunk helpers under a single namespace.
"""

from .framing import DONE, Framing, LineBuffer, StreamEvent, iter_stream_events
from .streaming import accumulate_chunks, group_by_model
from .streaming_metrics import StreamMetrics
from .streaming_finalize import finalize_stream
from .streaming_support import streaming_supported

__all__ = [
    "DONE",
    "Framing",
    "LineBuffer",
    "StreamEvent",
    "iter_stream_events",
    "accumulate_chunks",
    "group_by_model",
    "StreamMetrics",
    "finalize_stream",
    "streaming_supported",
]
