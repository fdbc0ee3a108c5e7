"""
ChatResult DTO: the batch outcome for one requested model.

Exactly one result is produced per requested model. A failure never raises;
it is carried in ``error`` (human-readable) and ``error_code`` (normalized
``ErrorCode`` value) with ``content`` left empty.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .token_usage import TokenUsage


@dataclass
class ChatResult:
    """Outcome of a non-streaming call.

    Attributes:
        model: Canonical model id the result belongs to.
        content: Full response text (empty on error).
        usage: Token usage when the provider reported it.
        error: Failure description; ``None`` on success.
        error_code: Normalized error category (``"timeout"``,
            ``"not_configured"``, ...) when ``error`` is set.
    """

    model: str
    content: str = ""
    usage: Optional[TokenUsage] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, model: str, error: str, error_code: Optional[str] = None) -> "ChatResult":
        return cls(model=model, content="", error=error, error_code=error_code)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary; unset optional keys are omitted."""
        out: Dict[str, Any] = {"model": self.model, "content": self.content}
        if self.usage is not None:
            out["usage"] = self.usage.to_dict()
        if self.error is not None:
            out["error"] = self.error
            if self.error_code is not None:
                out["error_code"] = self.error_code
        return out


__all__ = ["ChatResult"]
