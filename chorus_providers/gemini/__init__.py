"""Gemini provider adapter package."""

from .client import GeminiProvider

__all__ = ["GeminiProvider"]
