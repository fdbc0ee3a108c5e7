"""Shared helpers for provider, engine and service tests.

Provides canned wire bodies (SSE / NDJSON), an ``httpx.MockTransport``
request recorder, a response stream that stalls, and a log capture handler.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx


def sse_body(*payloads: Any, done: bool = True) -> bytes:
    """Encode payloads as an SSE body.

    A ``(name, data)`` tuple is written with an ``event:`` line; anything else
    as a bare ``data:`` line. ``data: [DONE]`` is appended when ``done``.
    """
    parts: List[str] = []
    for payload in payloads:
        if isinstance(payload, tuple):
            name, data = payload
            parts.append(f"event: {name}\ndata: {json.dumps(data)}\n\n")
        else:
            parts.append(f"data: {json.dumps(payload)}\n\n")
    if done:
        parts.append("data: [DONE]\n\n")
    return "".join(parts).encode("utf-8")


def ndjson_body(*payloads: Any, prefix: str = "") -> bytes:
    return "".join(f"{prefix}{json.dumps(p)}\n" for p in payloads).encode("utf-8")


def split_every(data: bytes, size: int) -> List[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)]


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered in fixed pieces, optionally stalling afterwards."""

    def __init__(self, pieces: Iterable[bytes], *, stall: bool = False) -> None:
        self._pieces = list(pieces)
        self._stall = stall
        self.closed = False

    async def __aiter__(self):
        for piece in self._pieces:
            await asyncio.sleep(0)
            yield piece
        if self._stall:
            await asyncio.sleep(3600)

    async def aclose(self) -> None:
        self.closed = True


class Recorder:
    """``httpx.MockTransport`` handler that records requests.

    ``respond`` may be a plain or an async callable returning ``httpx.Response``.
    """

    def __init__(self, respond: Callable[[httpx.Request], Any]) -> None:
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def json_transport(body: Any, status: int = 200) -> Recorder:
    return Recorder(lambda request: httpx.Response(status, json=body))


def stream_transport(body: bytes, status: int = 200, *, piece_size: Optional[int] = None) -> Recorder:
    def respond(request: httpx.Request) -> httpx.Response:
        pieces = split_every(body, piece_size) if piece_size else [body]
        return httpx.Response(status, stream=ChunkedStream(pieces))

    return Recorder(respond)


class ListHandler(logging.Handler):
    """Capture ``log_event`` payloads emitted through the providers logger."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def events(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for record in self.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if not isinstance(payload, dict):
                continue
            payload["_level"] = record.levelno
            if name is None or payload.get("event") == name:
                out.append(payload)
        return out
