"""
ChatRequest DTO for provider-agnostic chat invocations.

Adapters map this normalized request shape to their HTTP payloads. Unset
sampling parameters are filled with the provider's defaults by the adapter;
an explicit ``0`` is always honoured.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .message import Message


@dataclass
class ChatRequest:
    """Normalized chat request sent to provider adapters.

    Attributes:
        model: Canonical model identifier (e.g. ``"gpt-5"``); adapters map it
            to their configured wire model name.
        messages: Ordered list of chat `Message` instances.
        temperature: Sampling temperature, or ``None`` for the provider default.
        max_output_tokens: Completion cap, or ``None`` for the provider default.
        stream: Whether the caller asked for incremental output.
    """

    model: str
    messages: List[Message]
    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None
    stream: bool = False


__all__ = [
    "ChatRequest",
]
