"""Error translation helpers shared by HTTP provider adapters.

Every failure an adapter can meet is turned into a ``ProviderError`` whose
message reads ``"<Provider> API error: ..."`` so results from different
providers look alike to callers.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from ..errors import ErrorCode, ProviderError, classify_exception, status_to_code

# Keep error strings readable when a provider returns an HTML error page.
_MAX_BODY_CHARS = 500


def http_status_error(
    display_name: str,
    provider: str,
    status: int,
    reason: str,
    body: str = "",
) -> ProviderError:
    """Build the error for a non-2xx response.

    The message is ``"<Provider> API error: <status> <reason>"`` followed by
    ``" - <body>"`` when the provider sent a body.
    """
    message = f"{display_name} API error: {status} {reason}".rstrip()
    text = (body or "").strip()
    if text:
        if len(text) > _MAX_BODY_CHARS:
            text = text[:_MAX_BODY_CHARS] + "..."
        message = f"{message} - {text}"
    return ProviderError(
        code=status_to_code(status),
        message=message,
        provider=provider,
        status=status,
        raw=text or None,
    )


def protocol_error(display_name: str, provider: str, detail: str) -> ProviderError:
    return ProviderError(
        code=ErrorCode.PROTOCOL,
        message=f"{display_name} API error: {detail}",
        provider=provider,
    )


def describe_exception(display_name: str, exc: BaseException) -> str:
    """Return a human-readable error string for a transport-level exception."""
    if isinstance(exc, httpx.TimeoutException):
        return f"{display_name} API error: request timed out"
    if isinstance(exc, httpx.ConnectError):
        return f"{display_name} API error: connection failed ({exc})"
    detail = str(exc).strip() or type(exc).__name__
    return f"{display_name} API error: {detail}"


def exception_to_error(display_name: str, provider: str, exc: BaseException) -> ProviderError:
    """Normalize any exception into a ``ProviderError``."""
    if isinstance(exc, ProviderError):
        return exc
    return ProviderError(
        code=classify_exception(exc),
        message=describe_exception(display_name, exc),
        provider=provider,
        raw=repr(exc),
    )


def embedded_error_message(data: Any) -> Optional[str]:
    """Return the message of an ``{"error": {...}}`` envelope, if present."""
    if not isinstance(data, Mapping):
        return None
    err = data.get("error")
    if err is None:
        return None
    if isinstance(err, Mapping):
        kind = err.get("type") or err.get("status")
        msg = err.get("message") or kind or "unknown error"
        return f"{kind}: {msg}" if kind and kind != msg else str(msg)
    return str(err)


__all__ = [
    "http_status_error",
    "protocol_error",
    "describe_exception",
    "exception_to_error",
    "embedded_error_message",
]
