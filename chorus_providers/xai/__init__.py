"""xAI provider adapter package."""

from .client import XAIProvider

__all__ = ["XAIProvider"]
