"""Context fields shared by every event of one provider call or dispatch."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context merged into ``log_event`` payloads.

    Attributes:
        provider: Provider family (``openai``, ``gemini``, ...).
        model: Canonical model id.
        dispatch_id: Short id shared by all events of one dispatch.
        mode: ``batch`` or ``stream`` for dispatch-level events.
        extra: Additional keys; ``None`` values are dropped.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    dispatch_id: Optional[str] = None
    mode: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        out.update(self.extra or {})
        return {k: v for k, v in out.items() if v is not None}


__all__ = ["LogContext"]
