"""OpenAI provider adapter package."""

from .client import OpenAIProvider

__all__ = ["OpenAIProvider"]
