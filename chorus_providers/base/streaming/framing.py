"""Wire framing for streamed provider responses.

Provider bodies arrive as arbitrary byte reads; a read may end in the middle
of a line or in the middle of a multi-byte UTF-8 sequence. ``LineBuffer``
carries both kinds of remainder over to the next read so that parsing never
depends on where the network happened to split the body.

Two framings are supported:

``Framing.SSE``
    Server-sent events. ``event:`` lines name the payload of the following
    ``data:`` line(s); a blank line ends the event; ``:`` lines are comments.
    ``data: [DONE]`` is reported as the ``DONE`` sentinel.

``Framing.NDJSON``
    One JSON object per line. An optional ``data:`` prefix is tolerated and
    lines that do not start with ``{`` are ignored.

Lines whose JSON cannot be decoded are skipped and logged at WARNING as
``stream.decode_error``; they never abort the stream.
"""
from __future__ import annotations

import codecs
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterable, AsyncIterator, List, Optional

from ..logging import LogContext, get_logger, log_event

_DONE_MARKER = "[DONE]"


class Framing(str, Enum):
    SSE = "sse"
    NDJSON = "ndjson"


@dataclass(frozen=True)
class StreamEvent:
    """One decoded unit of a provider stream.

    Attributes:
        name: SSE event name (``"message"`` when unnamed or for NDJSON).
        data: Decoded JSON payload; ``None`` for the ``DONE`` sentinel.
    """

    name: str
    data: Any

    @property
    def is_done(self) -> bool:
        return self.name == _DONE_MARKER


DONE = StreamEvent(name=_DONE_MARKER, data=None)


class LineBuffer:
    """Incremental UTF-8 decoder that yields only complete lines."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    def feed(self, data: bytes) -> List[str]:
        """Consume ``data`` and return every line it completed (without EOL)."""
        text = self._pending + self._decoder.decode(data)
        *lines, self._pending = text.split("\n")
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> List[str]:
        """Return the trailing unterminated line, if any, at end of body."""
        text = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        text = text.rstrip("\r")
        return [text] if text.strip() else []


class _LineParser:
    def __init__(self, logger: logging.Logger, ctx: Optional[LogContext]) -> None:
        self._logger = logger
        self._ctx = ctx

    def _decode(self, payload: str) -> Optional[Any]:
        try:
            return json.loads(payload)
        except ValueError:
            log_event(
                self._logger,
                "stream.decode_error",
                self._ctx,
                level=logging.WARNING,
                line=payload[:200],
            )
            return None

    def parse(self, line: str) -> Optional[StreamEvent]:  # pragma: no cover - abstract
        raise NotImplementedError


class _SSEParser(_LineParser):
    def __init__(self, logger: logging.Logger, ctx: Optional[LogContext]) -> None:
        super().__init__(logger, ctx)
        self._event_name: Optional[str] = None

    def parse(self, line: str) -> Optional[StreamEvent]:
        if not line.strip():
            self._event_name = None
            return None
        if line.startswith(":"):
            return None
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            self._event_name = value.strip() or None
            return None
        if field != "data":
            return None
        payload = value.strip()
        if not payload:
            return None
        if payload == _DONE_MARKER:
            return DONE
        data = self._decode(payload)
        if data is None:
            return None
        return StreamEvent(name=self._event_name or "message", data=data)


class _NDJSONParser(_LineParser):
    def parse(self, line: str) -> Optional[StreamEvent]:
        payload = line.strip()
        if payload.startswith("data:"):
            payload = payload[len("data:"):].strip()
        if not payload:
            return None
        if payload == _DONE_MARKER:
            return DONE
        if not payload.startswith("{"):
            return None
        data = self._decode(payload)
        if data is None:
            return None
        return StreamEvent(name="message", data=data)


def _parser_for(framing: Framing, logger: logging.Logger, ctx: Optional[LogContext]) -> _LineParser:
    if framing is Framing.SSE:
        return _SSEParser(logger, ctx)
    return _NDJSONParser(logger, ctx)


async def iter_stream_events(
    byte_chunks: AsyncIterable[bytes],
    framing: Framing,
    *,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> AsyncIterator[StreamEvent]:
    """Decode a raw byte stream into ``StreamEvent`` values.

    Parameters
    ----------
    byte_chunks:
        Raw body reads, typically ``httpx.Response.aiter_bytes()``.
    framing:
        Wire framing of the body.
    logger, ctx:
        Destination and context for ``stream.decode_error`` warnings.
    """
    parser = _parser_for(framing, logger or get_logger("providers.streaming"), ctx)
    buffer = LineBuffer()
    async for chunk in byte_chunks:
        for line in buffer.feed(chunk):
            event = parser.parse(line)
            if event is not None:
                yield event
    for line in buffer.flush():
        event = parser.parse(line)
        if event is not None:
            yield event


__all__ = [
    "Framing",
    "StreamEvent",
    "DONE",
    "LineBuffer",
    "iter_stream_events",
]
