"""GeminiProvider adapter.

Uses the Generative Language REST API over httpx. Authentication goes in the
``x-goog-api-key`` header so keys never appear in URLs or logs.

Streaming requests ``alt=sse``; bodies are read with the tolerant
newline-delimited JSON framing (optional ``data:`` prefix, non-object lines
ignored). A chunk without candidates is logged and skipped unless the prompt
itself was blocked.

Content policy: a response with no text that is blocked by the prompt
feedback, a safety finish reason or a blocked safety rating becomes
``"Response blocked by safety[: reason]"``. Other abnormal finish reasons
with no text become ``"Generation stopped: <reason>"``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..base.errors import ErrorCode, ProviderError, status_to_code
from ..base.http_provider_parts import BaseHTTPProvider, protocol_error, provider_init_from_config
from ..base.logging import log_event
from ..base.models import ChatRequest, ChatResult
from ..base.streaming import Framing, StreamEvent, StreamMetrics
from ..base.timeouts import TimeoutConfig
from .helpers import (
    NORMAL_FINISH_REASONS,
    build_generate_params,
    candidate_block_reason,
    candidate_text,
    extract_usage,
    first_candidate,
    prompt_block_reason,
    safety_message,
)


class GeminiProvider(BaseHTTPProvider):
    """Gemini adapter bound to one canonical model id (default ``"gemini-2.5-pro"``)."""

    framing = Framing.NDJSON
    display_name = "Google AI"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model_id: str = "gemini-2.5-pro",
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        streaming: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[TimeoutConfig] = None,
    ) -> None:
        super().__init__(
            provider_init_from_config(
                "gemini",
                model_id=model_id,
                api_key=api_key,
                model=model,
                base_url=base_url,
                streaming=streaming,
                transport=transport,
                timeout=timeout,
            )
        )

    @property
    def provider_name(self) -> str:
        return "gemini"

    def _headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self._api_key or "", "Content-Type": "application/json"}

    def _endpoint(self, stream: bool) -> str:
        action = "streamGenerateContent" if stream else "generateContent"
        return f"/models/{self._wire_model}:{action}"

    def _query_params(self, stream: bool) -> Dict[str, str]:
        return {"alt": "sse"} if stream else {}

    def _build_payload(self, request: ChatRequest, stream: bool) -> Dict[str, Any]:
        return build_generate_params(request)

    # ----- errors -----
    def _api_error(self, data: Mapping[str, Any]) -> ProviderError:
        err = data.get("error")
        if isinstance(err, Mapping):
            status = err.get("code") if isinstance(err.get("code"), int) else None
            message = err.get("message") or err.get("status") or "unknown error"
        else:
            status, message = None, str(err)
        return ProviderError(
            code=status_to_code(status) if status else ErrorCode.UNKNOWN,
            message=f"Google AI API error: {message}",
            provider=self.provider_name,
            model=self._model_id,
            status=status,
        )

    def _safety_error(self, reason: Optional[str]) -> ProviderError:
        return ProviderError(
            code=ErrorCode.CONTENT_FILTER,
            message=safety_message(reason),
            provider=self.provider_name,
            model=self._model_id,
        )

    def _stopped_error(self, reason: str) -> ProviderError:
        return ProviderError(
            code=ErrorCode.UNKNOWN,
            message=f"Generation stopped: {reason}",
            provider=self.provider_name,
            model=self._model_id,
        )

    def _no_text_error(self, candidate: Mapping[str, Any]) -> Optional[ProviderError]:
        """Classify a candidate that produced no text; ``None`` when that is benign."""
        reason = candidate_block_reason(candidate)
        if reason is not None:
            return self._safety_error(reason)
        finish = candidate.get("finishReason")
        if finish and finish not in NORMAL_FINISH_REASONS:
            return self._stopped_error(finish)
        return None

    # ----- batch -----
    def _parse_response(self, data: Any) -> ChatResult:
        if not isinstance(data, Mapping):
            raise protocol_error(self.display_name, self.provider_name, "unexpected response body")
        if data.get("error"):
            raise self._api_error(data)
        candidate = first_candidate(data)
        if candidate is None:
            block = prompt_block_reason(data)
            if block:
                raise self._safety_error(block)
            raise ProviderError(
                code=ErrorCode.PROTOCOL,
                message="No candidates returned by Google AI API",
                provider=self.provider_name,
                model=self._model_id,
            )
        text = candidate_text(candidate)
        if not text and (err := self._no_text_error(candidate)) is not None:
            raise err
        return ChatResult(model=self._model_id, content=text, usage=extract_usage(data))

    # ----- streaming -----
    def _handle_event(self, event: StreamEvent, metrics: StreamMetrics) -> Optional[str]:
        data = event.data
        if not isinstance(data, Mapping):
            return None
        if data.get("error"):
            self._fail_event(metrics, self._api_error(data))
            return None
        metrics.record_usage(extract_usage(data))
        candidate = first_candidate(data)
        if candidate is None:
            block = prompt_block_reason(data)
            if block:
                self._fail_event(metrics, self._safety_error(block))
            elif "usageMetadata" not in data:
                log_event(self._logger, "stream.chunk_without_candidates", self._ctx(), level=logging.WARNING)
            return None
        text = candidate_text(candidate)
        finish = candidate.get("finishReason")
        if finish:
            metrics.finish_reason = finish
            metrics.terminal = True
        if not text and metrics.emitted == 0 and (err := self._no_text_error(candidate)) is not None:
            self._fail_event(metrics, err)
        return text


__all__ = ["GeminiProvider"]
