"""
Pydantic DTOs and validators for inbound dispatch requests.

Purpose
-------
Validate the inbound multi-model chat payload before it enters the
aggregation engine. Enforces roles, non-empty content lists and numeric
parameter bounds to catch issues early.

External dependencies: Pydantic only (no network calls). No timeouts.

Fallback semantics: Not applicable. Validation either succeeds or raises a
`pydantic.ValidationError`. Callers handle it at their edge (for example by
answering 400 in an HTTP server).
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import Message


Role = Literal["system", "user", "assistant"]


class MessageDTO(BaseModel):
    """A chat message with text content.

    Rules:
        - `role` must be one of Role.
        - `user` messages must contain visible text.
    """

    role: Role
    content: str = ""

    @model_validator(mode="after")
    def _validate_content(self) -> "MessageDTO":
        if self.role == "user" and not self.content.strip():
            raise ValueError("user message content must be non-empty")
        return self

    def to_message(self) -> Message:
        return Message(role=self.role, content=self.content)


class DispatchRequestDTO(BaseModel):
    """One multi-model chat dispatch.

    Attributes:
        models: Canonical model ids to query (order is preserved).
        messages: Shared conversation sent to every model.
        api_keys: Per-model keys supplied with the request.
        stream: Request incremental output.
        temperature: Optional sampling temperature (0..2).
        max_output_tokens: Optional completion cap (> 0).
        timeout_seconds: Optional wall-clock ceiling for the dispatch (> 0).
    """

    models: List[str] = Field(min_length=1)
    messages: List[MessageDTO] = Field(min_length=1)
    api_keys: Dict[str, str] = Field(default_factory=dict)
    stream: bool = False
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_output_tokens: Optional[int] = Field(default=None, gt=0)
    timeout_seconds: Optional[float] = Field(default=None, gt=0)

    @field_validator("models")
    @classmethod
    def _validate_models(cls, value: List[str]) -> List[str]:
        cleaned = [m.strip() for m in value]
        if any(not m for m in cleaned):
            raise ValueError("model ids must be non-empty strings")
        return cleaned

    def to_messages(self) -> List[Message]:
        return [m.to_message() for m in self.messages]


__all__ = [
    "MessageDTO",
    "DispatchRequestDTO",
]
