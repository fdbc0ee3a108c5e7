"""Gemini helpers: request building and candidate inspection.

Side-effect free utilities for the ``generateContent`` /
``streamGenerateContent`` REST endpoints.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.constants import SAFETY_BLOCKED_ERROR
from ..base.models import ChatRequest, TokenUsage
from ..base.utils.messages import split_system
from ..config.defaults import GEMINI_DEFAULT_MAX_OUTPUT_TOKENS, GEMINI_DEFAULT_TEMPERATURE

NORMAL_FINISH_REASONS = frozenset({"STOP", "MAX_TOKENS", "FINISH_REASON_STOP", "FINISH_REASON_UNSPECIFIED"})
SAFETY_FINISH_REASONS = frozenset({"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"})


def build_generate_params(request: ChatRequest) -> Dict[str, Any]:
    """Build the ``generateContent`` body.

    ``assistant`` turns become ``model`` turns, text is wrapped in ``parts``
    and the system text (all system turns joined) becomes ``systemInstruction``.
    """
    system, turns = split_system(request.messages)
    body: Dict[str, Any] = {
        "contents": [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in turns
        ],
        "generationConfig": {
            "temperature": GEMINI_DEFAULT_TEMPERATURE if request.temperature is None else request.temperature,
            "maxOutputTokens": (
                GEMINI_DEFAULT_MAX_OUTPUT_TOKENS if request.max_output_tokens is None else request.max_output_tokens
            ),
        },
    }
    if system:
        body["systemInstruction"] = {"parts": [{"text": system}]}
    return body


def first_candidate(data: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    return first if isinstance(first, Mapping) else None


def candidate_text(candidate: Mapping[str, Any]) -> str:
    """Join the text parts of a candidate, skipping thought summaries."""
    content = candidate.get("content") or {}
    parts = content.get("parts") if isinstance(content, Mapping) else None
    if not isinstance(parts, list):
        return ""
    out: List[str] = []
    for part in parts:
        if not isinstance(part, Mapping) or part.get("thought"):
            continue
        text = part.get("text")
        if isinstance(text, str):
            out.append(text)
    return "".join(out)


def prompt_block_reason(data: Mapping[str, Any]) -> Optional[str]:
    feedback = data.get("promptFeedback") or {}
    reason = feedback.get("blockReason") if isinstance(feedback, Mapping) else None
    return reason or None


def candidate_block_reason(candidate: Mapping[str, Any]) -> Optional[str]:
    """Return the safety reason blocking ``candidate``; ``""`` when blocked without one.

    ``None`` means the candidate is not safety-blocked.
    """
    finish = candidate.get("finishReason")
    if finish in SAFETY_FINISH_REASONS:
        return finish
    ratings = candidate.get("safetyRatings") or []
    for rating in ratings if isinstance(ratings, list) else []:
        if isinstance(rating, Mapping) and rating.get("blocked"):
            return rating.get("category") or ""
    return None


def safety_message(reason: Optional[str]) -> str:
    return f"{SAFETY_BLOCKED_ERROR}: {reason}" if reason else SAFETY_BLOCKED_ERROR


def extract_usage(data: Mapping[str, Any]) -> Optional[TokenUsage]:
    return TokenUsage.from_mapping(
        data.get("usageMetadata"),
        prompt_key="promptTokenCount",
        completion_key="candidatesTokenCount",
        total_key="totalTokenCount",
    )


__all__ = [
    "NORMAL_FINISH_REASONS",
    "SAFETY_FINISH_REASONS",
    "build_generate_params",
    "first_candidate",
    "candidate_text",
    "prompt_block_reason",
    "candidate_block_reason",
    "safety_message",
    "extract_usage",
]
