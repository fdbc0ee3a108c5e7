"""Per-call stream state.

Each ``stream()`` invocation owns one ``StreamMetrics`` instance; nothing is
shared between concurrent calls.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from ..models import TokenUsage


@dataclass
class StreamMetrics:
    """Collected state for a single streaming invocation.

    Attributes:
        emitted: Number of non-empty deltas yielded.
        finish_reason: Provider finish/stop reason, once seen.
        terminal: ``True`` once the provider's terminal signal was observed.
        usage: Token usage accumulated from usage-bearing events.
        error: Error recorded from an error event or content-policy signal.
        error_code: Normalized category for ``error``.
    """

    emitted: int = 0
    finish_reason: Optional[str] = None
    terminal: bool = False
    usage: Optional[TokenUsage] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    started_at: float = field(default_factory=time.monotonic)
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def record_delta(self, text: str) -> None:
        if not text:
            return
        if self.emitted == 0:
            self.time_to_first_token_ms = (time.monotonic() - self.started_at) * 1000.0
        self.emitted += 1

    def record_usage(self, usage: Optional[TokenUsage]) -> None:
        if usage is None:
            return
        self.usage = usage if self.usage is None else self.usage.merge(usage)

    def fail(self, error: str, error_code: Optional[str]) -> None:
        self.error = error
        self.error_code = error_code
        self.terminal = True

    def close(self) -> None:
        self.total_duration_ms = (time.monotonic() - self.started_at) * 1000.0


__all__ = ["StreamMetrics"]
