"""OpenAI-style provider base abstractions.

Re-exports provide a stable import surface for the OpenAI, xAI and DeepSeek
adapters.
"""

from .base import BaseOpenAIStyleProvider
from .style_helpers import build_chat_params, extract_openai_text, extract_usage, translate_openai_chunk

__all__ = [
    "BaseOpenAIStyleProvider",
    "build_chat_params",
    "extract_openai_text",
    "extract_usage",
    "translate_openai_chunk",
]
