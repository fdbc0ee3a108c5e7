"""Payload and response helpers for OpenAI-compatible chat completions.

Shared by the OpenAI, xAI and DeepSeek adapters, whose wire formats differ
only in base URL and model name.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from ...config.defaults import OPENAI_STYLE_DEFAULT_MAX_TOKENS, OPENAI_STYLE_DEFAULT_TEMPERATURE
from ..models import ChatRequest, TokenUsage
from ..utils.messages import merge_system

# Finish reasons that end a completion normally.
NORMAL_FINISH_REASONS = frozenset({"stop", "length", "tool_calls", "function_call"})
CONTENT_FILTER_REASON = "content_filter"


def build_chat_params(request: ChatRequest, wire_model: str, *, stream: bool) -> Dict[str, Any]:
    """Return the chat completions payload for ``request``.

    Unset sampling values fall back to the OpenAI-style defaults; explicit
    zeros are sent as given. System turns are merged into one inline
    system message.
    """
    params: Dict[str, Any] = {
        "model": wire_model,
        "messages": [{"role": m.role, "content": m.content} for m in merge_system(request.messages)],
        "temperature": (
            OPENAI_STYLE_DEFAULT_TEMPERATURE if request.temperature is None else request.temperature
        ),
        "max_tokens": (
            OPENAI_STYLE_DEFAULT_MAX_TOKENS if request.max_output_tokens is None else request.max_output_tokens
        ),
    }
    if stream:
        params["stream"] = True
        params["stream_options"] = {"include_usage": True}
    return params


def extract_usage(data: Mapping[str, Any]) -> Optional[TokenUsage]:
    return TokenUsage.from_mapping(
        data.get("usage"),
        prompt_key="prompt_tokens",
        completion_key="completion_tokens",
        total_key="total_tokens",
    )


def extract_openai_text(data: Mapping[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(content, finish_reason)`` of the first choice.

    ``content`` is ``None`` when the body has no choices at all.
    """
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None, None
    first = choices[0] if isinstance(choices[0], Mapping) else {}
    message = first.get("message") or {}
    content = message.get("content") if isinstance(message, Mapping) else None
    return (content if isinstance(content, str) else ""), first.get("finish_reason")


def translate_openai_chunk(data: Mapping[str, Any]) -> Tuple[str, Optional[str]]:
    """Return ``(text_delta, finish_reason)`` from one streamed chunk."""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return "", None
    first = choices[0] if isinstance(choices[0], Mapping) else {}
    delta = first.get("delta") or {}
    text = delta.get("content") if isinstance(delta, Mapping) else None
    return (text if isinstance(text, str) else ""), first.get("finish_reason")


__all__ = [
    "NORMAL_FINISH_REASONS",
    "CONTENT_FILTER_REASON",
    "build_chat_params",
    "extract_usage",
    "extract_openai_text",
    "translate_openai_chunk",
]
