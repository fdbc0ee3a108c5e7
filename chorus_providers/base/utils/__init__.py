"""Small pure helpers for the providers base layer."""

from .messages import coerce_messages, merge_system, split_system

__all__ = ["coerce_messages", "merge_system", "split_system"]
