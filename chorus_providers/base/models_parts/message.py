"""
Message DTO used across providers.

Defines the `Message` dataclass and the `Role` literal for the three roles the
aggregation engine accepts. Adapters translate these into each provider's wire
shape (inline system turn, top-level ``system`` field, or
``systemInstruction``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping


# Message roles accepted by every adapter.
Role = Literal["system", "user", "assistant"]

VALID_ROLES = frozenset({"system", "user", "assistant"})


@dataclass(frozen=True)
class Message:
    """A single chat turn.

    Attributes:
        role: ``"system"``, ``"user"`` or ``"assistant"``.
        content: Plain text of the turn.
    """

    role: Role
    content: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Message":
        """Build a message from a ``{"role": ..., "content": ...}`` mapping."""
        return cls(role=data["role"], content=str(data.get("content") or ""))

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


__all__ = [
    "Message",
    "Role",
    "VALID_ROLES",
]
