"""Per-dispatch timeout and cancellation supervisor.

State machine::

    RUNNING --(all models done)----------------------------> COMPLETE
    RUNNING --(deadline or cancel)--> FORCED_TERMINATION --> COMPLETE

The deadline is measured on the event loop clock from construction. A
cancelled dispatch reports ``"Request cancelled"`` (``error_code``
``cancelled``) for every still-active model; an expired one reports
``"<model> timed out after Ns"`` (``error_code`` ``timeout``), so callers can
tell the two apart without parsing strings.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Optional, Tuple

from ..base.cancellation import CancellationToken
from ..base.constants import CANCELLED_ERROR, TIMED_OUT_TEMPLATE
from ..base.errors import ErrorCode
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ChatResult, StreamChunk


class DispatchState(str, Enum):
    RUNNING = "running"
    FORCED_TERMINATION = "forced_termination"
    COMPLETE = "complete"


class TerminationReason(str, Enum):
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


class DispatchSupervisor:
    """Track the deadline and cancellation signal of one dispatch.

    Parameters:
        timeout_seconds: Wall-clock ceiling for the dispatch.
        token: Caller cancellation token; a private one is created when omitted.
        logger: Destination for ``dispatch.timeout`` / ``dispatch.cancelled``.
        ctx: Logging context of the dispatch.
    """

    def __init__(
        self,
        timeout_seconds: float,
        token: Optional[CancellationToken] = None,
        *,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._loop = asyncio.get_running_loop()
        self.timeout_seconds = float(timeout_seconds)
        self.started_at = self._loop.time()
        self.deadline = self.started_at + self.timeout_seconds
        self.token = token if token is not None else CancellationToken()
        self.state = DispatchState.RUNNING
        self.reason: Optional[TerminationReason] = None
        self._logger = logger or get_logger("providers.aggregation")
        self.ctx = ctx

    # ----- clock -----
    def elapsed(self) -> float:
        return self._loop.time() - self.started_at

    def remaining(self) -> float:
        """Seconds left before the deadline (never negative)."""
        return max(0.0, self.deadline - self._loop.time())

    @property
    def expired(self) -> bool:
        return self._loop.time() >= self.deadline

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def check(self) -> Optional[TerminationReason]:
        """Return why the dispatch must stop now, or ``None`` to keep going.

        Cancellation wins over an expiry observed at the same moment.
        """
        if self.reason is not None:
            return self.reason
        if self.token.cancelled:
            return TerminationReason.CANCELLED
        if self.expired:
            return TerminationReason.TIMEOUT
        return None

    async def wait_cancelled(self) -> None:
        await self.token.wait()

    # ----- transitions -----
    def terminate(self, reason: TerminationReason, *, active: int = 0) -> None:
        """Enter ``FORCED_TERMINATION`` (first call wins)."""
        if self.state is not DispatchState.RUNNING:
            return
        self.state = DispatchState.FORCED_TERMINATION
        self.reason = reason
        log_event(
            self._logger,
            "dispatch.timeout" if reason is TerminationReason.TIMEOUT else "dispatch.cancelled",
            self.ctx,
            level=logging.WARNING if reason is TerminationReason.TIMEOUT else logging.INFO,
            active_models=active,
            elapsed_s=round(self.elapsed(), 3),
            timeout_s=self.timeout_seconds,
            cancel_reason=self.token.reason,
        )

    def complete(self) -> None:
        self.state = DispatchState.COMPLETE

    # ----- forced terminal values -----
    def forced_error(self, model: str) -> Tuple[str, str]:
        """Return ``(message, error_code)`` for a model cut off by the supervisor."""
        if self.reason is TerminationReason.CANCELLED:
            return CANCELLED_ERROR, ErrorCode.CANCELLED.value
        return (
            TIMED_OUT_TEMPLATE.format(model=model, seconds=self.timeout_seconds),
            ErrorCode.TIMEOUT.value,
        )

    def forced_chunk(self, model: str) -> StreamChunk:
        message, code = self.forced_error(model)
        return StreamChunk.terminal(model, error=message, error_code=code)

    def forced_result(self, model: str) -> ChatResult:
        message, code = self.forced_error(model)
        return ChatResult.failure(model, message, code)


__all__ = ["DispatchState", "TerminationReason", "DispatchSupervisor"]
