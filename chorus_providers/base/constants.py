"""Base shared constants for provider adapters and the aggregation engine.

Central location to avoid scattering magic strings and default numbers.

# pragma: allowlist secret
"""
from __future__ import annotations

# Synthetic error for a requested model without a credential.
NO_API_KEY_TEMPLATE = "No API key configured for {model}"

# Supervisor-forced terminal reasons.
TIMED_OUT_TEMPLATE = "{model} timed out after {seconds:g}s"
CANCELLED_ERROR = "Request cancelled"

# Content-policy messages.
SAFETY_BLOCKED_ERROR = "Response blocked by safety"
CONTENT_FILTER_ERROR = "Response blocked by content filter"

# Stream ended at EOF without a terminal signal and without any content.
EMPTY_STREAM_ERROR = "Stream ended without a response"

# Default timeouts (seconds)
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_READ_TIMEOUT_SECONDS = 60.0
DEFAULT_DISPATCH_TIMEOUT_SECONDS = 30.0

__all__ = [
    "NO_API_KEY_TEMPLATE",
    "TIMED_OUT_TEMPLATE",
    "CANCELLED_ERROR",
    "SAFETY_BLOCKED_ERROR",
    "CONTENT_FILTER_ERROR",
    "EMPTY_STREAM_ERROR",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_READ_TIMEOUT_SECONDS",
    "DEFAULT_DISPATCH_TIMEOUT_SECONDS",
]
