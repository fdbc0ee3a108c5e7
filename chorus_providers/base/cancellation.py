"""Cooperative cancellation primitives (public API facade).

Notes
-----
- ``CancellationToken`` is the per-dispatch cancellation signal.
- ``CancelledError`` is raised by ``CancellationToken.raise_if_cancelled``.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
