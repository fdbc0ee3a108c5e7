"""Token accounting reported by a provider for one call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


@dataclass(frozen=True)
class TokenUsage:
    """Prompt/completion token counts.

    ``total_tokens`` is derived from the other two counts when the provider
    does not report it.
    """

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_counts(
        cls,
        prompt: Any = None,
        completion: Any = None,
        total: Any = None,
    ) -> Optional["TokenUsage"]:
        """Build usage from raw provider values; ``None`` when nothing is known."""
        p, c, t = _as_int(prompt), _as_int(completion), _as_int(total)
        if p is None and c is None and t is None:
            return None
        p = p or 0
        c = c or 0
        return cls(prompt_tokens=p, completion_tokens=c, total_tokens=t if t is not None else p + c)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any] | None,
        *,
        prompt_key: str,
        completion_key: str,
        total_key: str | None = None,
    ) -> Optional["TokenUsage"]:
        """Extract usage from a provider usage object using the given key names."""
        if not isinstance(data, Mapping):
            return None
        return cls.from_counts(
            data.get(prompt_key),
            data.get(completion_key),
            data.get(total_key) if total_key else None,
        )

    def merge(self, other: Optional["TokenUsage"]) -> "TokenUsage":
        """Combine two partial reports, preferring non-zero values from ``other``."""
        if other is None:
            return self
        p = other.prompt_tokens or self.prompt_tokens
        c = other.completion_tokens or self.completion_tokens
        return TokenUsage(prompt_tokens=p, completion_tokens=c, total_tokens=p + c)

    def to_dict(self) -> Dict[str, int]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }


__all__ = ["TokenUsage"]
