"""DeepSeek provider adapter package."""

from .client import DeepseekProvider

__all__ = ["DeepseekProvider"]
