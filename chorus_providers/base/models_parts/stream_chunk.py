"""
StreamChunk DTO: one incremental unit of a streamed response.

A model's chunk sequence is zero or more non-terminal deltas followed by
exactly one terminal chunk (``done=True``). A chunk carrying ``error`` is
always terminal.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .token_usage import TokenUsage


@dataclass
class StreamChunk:
    """Incremental streamed output for one model.

    Attributes:
        model: Canonical model id the chunk belongs to.
        content: Text delta (may be empty, typically on terminal chunks).
        done: ``True`` on the model's final chunk.
        usage: Token usage, usually only on the terminal chunk.
        error: Failure description; forces ``done``.
        error_code: Normalized error category when ``error`` is set.
    """

    model: str
    content: str = ""
    done: bool = False
    usage: Optional[TokenUsage] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    def __post_init__(self) -> None:
        if self.error is not None:
            self.done = True

    @classmethod
    def terminal(
        cls,
        model: str,
        *,
        usage: Optional[TokenUsage] = None,
        error: Optional[str] = None,
        error_code: Optional[str] = None,
    ) -> "StreamChunk":
        return cls(model=model, content="", done=True, usage=usage, error=error, error_code=error_code)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"model": self.model, "content": self.content, "done": self.done}
        if self.usage is not None:
            out["usage"] = self.usage.to_dict()
        if self.error is not None:
            out["error"] = self.error
            if self.error_code is not None:
                out["error_code"] = self.error_code
        return out


__all__ = ["StreamChunk"]
