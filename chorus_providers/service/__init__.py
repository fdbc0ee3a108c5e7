"""Caller-side surfaces over the aggregation engine (NDJSON, dispatch helpers, CLI)."""

from .dispatch import build_engine, parse_payload, run_batch, run_stream
from .ndjson import chunk_event, encode_line, iter_ndjson

__all__ = [
    "build_engine",
    "parse_payload",
    "run_batch",
    "run_stream",
    "chunk_event",
    "encode_line",
    "iter_ndjson",
]
