"""
Structured provider error exception type.

Raised inside adapters to carry a normalized `ErrorCode` up to the adapter
boundary, where it is converted into the ``error`` field of a result or a
terminal stream chunk. It never crosses the public adapter contract.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message, surfaced verbatim to callers.
        provider: Provider key where the error originated (e.g., ``"openai"``).
        model: Optional canonical model id associated with the failure.
        status: HTTP status code when the failure came from a response.
        raw: Optional diagnostic payload (response body or exception repr).
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    status: Optional[int] = None
    raw: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
