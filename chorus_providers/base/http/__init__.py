"""HTTP helpers for providers (async client construction)."""

from .client import open_client

__all__ = ["open_client"]
