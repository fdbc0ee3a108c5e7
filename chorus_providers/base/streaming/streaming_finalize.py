"""Finalize stream helper.

Builds the terminal ``StreamChunk`` for a streaming call and emits the
consolidated end-of-stream log record.
"""
from __future__ import annotations

import logging

from ..constants import EMPTY_STREAM_ERROR
from ..errors import ErrorCode
from ..logging import LogContext, log_event, normalized_log_event
from ..models import StreamChunk
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    model: str,
    metrics: StreamMetrics,
) -> StreamChunk:
    """Create the terminal chunk for ``model`` from the collected ``metrics``.

    A body that ended without the provider's terminal signal still terminates
    normally when content was received; with no content it becomes an error.
    """
    metrics.close()
    if metrics.error is None and not metrics.terminal:
        if metrics.emitted == 0:
            metrics.error = EMPTY_STREAM_ERROR
            metrics.error_code = ErrorCode.PROTOCOL.value
        else:
            log_event(logger, "stream.unterminated", ctx, level=logging.WARNING, emitted_count=metrics.emitted)
    if metrics.error is None and metrics.finish_reason in {"length", "max_tokens", "MAX_TOKENS"}:
        log_event(logger, "stream.truncated", ctx, level=logging.WARNING, finish_reason=metrics.finish_reason)

    normalized_log_event(
        logger,
        "stream.end" if metrics.error is None else "stream.error",
        ctx,
        phase="finalize",
        attempt=None,
        error_code=metrics.error_code,
        emitted=metrics.emitted > 0,
        tokens=metrics.usage,
        emitted_count=metrics.emitted,
        finish_reason=metrics.finish_reason,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=metrics.error,
        level=logging.INFO if metrics.error is None else logging.WARNING,
    )
    return StreamChunk.terminal(
        model,
        usage=metrics.usage,
        error=metrics.error,
        error_code=metrics.error_code,
    )


__all__ = ["finalize_stream"]
