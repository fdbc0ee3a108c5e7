"""Interface parts package (one Protocol per file)."""

from .llm_provider import LLMProvider
from .supports_streaming import SupportsStreaming

__all__ = ["LLMProvider", "SupportsStreaming"]
