"""Models parts package public surface.

Re-exports individual DTOs so callers can import from
`chorus_providers.base.models_parts` if needed, while
`chorus_providers.base.models` remains the primary stable import path.
"""

from .message import Message, Role, VALID_ROLES
from .chat_request import ChatRequest
from .token_usage import TokenUsage
from .chat_result import ChatResult
from .stream_chunk import StreamChunk

__all__ = [
    "Message",
    "Role",
    "VALID_ROLES",
    "ChatRequest",
    "TokenUsage",
    "ChatResult",
    "StreamChunk",
]
