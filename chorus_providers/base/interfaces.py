"""
Provider interfaces public surface.

Re-exports the Protocols from ``chorus_providers.base.interfaces_parts``.
"""

from .interfaces_parts.llm_provider import LLMProvider
from .interfaces_parts.supports_streaming import SupportsStreaming

__all__ = [
    "LLMProvider",
    "SupportsStreaming",
]
