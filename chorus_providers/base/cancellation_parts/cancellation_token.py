"""Cooperative cancellation token implementation.

One token is created per dispatch. Cancelling it wakes every coroutine
blocked in :meth:`CancellationToken.wait`, which is how the aggregation engine
interrupts in-flight provider reads and pending waits.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from .cancelled_error import CancelledError


class CancellationToken:
    """A cooperative cancellation token with optional cascading semantics.

    The underlying ``asyncio.Event`` is the only cancellation flag. ``cancel``
    is idempotent: only the first call records a reason. Child tokens inherit
    cancellation when the parent is cancelled, including children linked
    after the fact. Cancel from the thread running the awaiting event loop.
    """

    def __init__(self, *, parent: Optional["CancellationToken"] = None) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None
        self._children: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation and cascade to children."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        for child in list(self._children):
            child.cancel(reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        self._children.append(token)
        if self.cancelled:
            token.cancel(self._reason)
        return token

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if the token is cancelled."""
        if self.cancelled:
            raise CancelledError(self._reason or "operation cancelled")

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._reason!r}, children={len(self._children)})"


__all__ = ["CancellationToken"]
