"""Anthropic helpers module.

Purpose:
- Side-effect-free utilities for the Anthropic Messages API: parameter
  building, text and usage extraction, and error-type mapping. Keeps
  ``client.py`` focused on wiring.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.errors import ErrorCode
from ..base.models import ChatRequest, TokenUsage
from ..base.utils.messages import split_system
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS

# Stop reason reported when the model declines to answer.
REFUSAL_STOP_REASON = "refusal"

_ERROR_TYPE_CODES: Dict[str, ErrorCode] = {
    "authentication_error": ErrorCode.AUTH,
    "permission_error": ErrorCode.AUTH,
    "invalid_request_error": ErrorCode.VALIDATION,
    "not_found_error": ErrorCode.NOT_FOUND,
    "rate_limit_error": ErrorCode.RATE_LIMIT,
    "overloaded_error": ErrorCode.UNAVAILABLE,
    "api_error": ErrorCode.SERVER_ERROR,
}


def build_message_params(request: ChatRequest, wire_model: str, *, stream: bool) -> Dict[str, Any]:
    """Build the Messages API payload.

    All system turns are joined into the top-level ``system`` field and
    removed from ``messages``. ``max_tokens`` is required by the API and
    defaults when unset; ``temperature`` is only sent when the caller set it.
    """
    system, turns = split_system(request.messages)
    params: Dict[str, Any] = {
        "model": wire_model,
        "max_tokens": (
            ANTHROPIC_DEFAULT_MAX_TOKENS if request.max_output_tokens is None else request.max_output_tokens
        ),
        "messages": [{"role": m.role, "content": m.content} for m in turns],
    }
    if system:
        params["system"] = system
    if request.temperature is not None:
        params["temperature"] = request.temperature
    if stream:
        params["stream"] = True
    return params


def extract_text(data: Mapping[str, Any]) -> str:
    """Join the text of every ``text`` content block."""
    blocks = data.get("content")
    if not isinstance(blocks, list):
        return ""
    parts: List[str] = []
    for block in blocks:
        if isinstance(block, Mapping) and block.get("type", "text") == "text":
            text = block.get("text")
            if isinstance(text, str):
                parts.append(text)
    return "".join(parts)


def extract_usage(usage: Any) -> Optional[TokenUsage]:
    return TokenUsage.from_mapping(usage, prompt_key="input_tokens", completion_key="output_tokens")


def error_code_for_type(error_type: Optional[str]) -> ErrorCode:
    return _ERROR_TYPE_CODES.get(error_type or "", ErrorCode.UNKNOWN)


__all__ = [
    "REFUSAL_STOP_REASON",
    "build_message_params",
    "extract_text",
    "extract_usage",
    "error_code_for_type",
]
