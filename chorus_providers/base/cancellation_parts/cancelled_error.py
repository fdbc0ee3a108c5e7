"""Cancellation error type.

Defines the public ``CancelledError`` raised by ``raise_if_cancelled``. It is
deliberately distinct from ``asyncio.CancelledError``: the latter unwinds a
task, this one reports that a dispatch was cancelled by its caller.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation observes a cancelled token."""


__all__ = ["CancelledError"]
