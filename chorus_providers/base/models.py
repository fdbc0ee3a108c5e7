"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``chorus_providers.base.models_parts``.
"""

from .models_parts.message import Message, Role, VALID_ROLES
from .models_parts.chat_request import ChatRequest
from .models_parts.token_usage import TokenUsage
from .models_parts.chat_result import ChatResult
from .models_parts.stream_chunk import StreamChunk

__all__ = [
    "Message",
    "Role",
    "VALID_ROLES",
    "ChatRequest",
    "TokenUsage",
    "ChatResult",
    "StreamChunk",
]
