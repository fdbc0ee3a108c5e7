"""BaseOpenAIStyleProvider: shared adapter for OpenAI-compatible chat APIs.

Purpose:
- Implement the Chat Completions wire format once for every provider that
  speaks it (OpenAI, xAI, DeepSeek). Subclasses only name themselves and
  supply their configuration defaults.

Streaming:
- SSE framing terminated by ``data: [DONE]``. ``stream_options.include_usage``
  is requested so the final chunk before ``[DONE]`` carries token usage.
- Finish reason ``content_filter`` ends the stream with an error only when
  no text was produced, matching ``generate``; ``length`` ends it normally
  and is logged as a truncation.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..constants import CONTENT_FILTER_ERROR
from ..errors import ErrorCode, ProviderError
from ..http_provider_parts import BaseHTTPProvider, embedded_error_message, protocol_error
from ..models import ChatRequest, ChatResult
from ..streaming import Framing, StreamEvent, StreamMetrics
from .style_helpers import (
    CONTENT_FILTER_REASON,
    build_chat_params,
    extract_openai_text,
    extract_usage,
    translate_openai_chunk,
)


class BaseOpenAIStyleProvider(BaseHTTPProvider):
    """Reusable base class for OpenAI-compatible providers.

    Subclasses must implement ``provider_name`` and set ``display_name``.
    """

    framing = Framing.SSE

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key or ''}",
            "Content-Type": "application/json",
        }

    def _endpoint(self, stream: bool) -> str:
        return "/chat/completions"

    def _build_payload(self, request: ChatRequest, stream: bool) -> Dict[str, Any]:
        return build_chat_params(request, self._wire_model, stream=stream)

    def _content_filter_error(self) -> ProviderError:
        return ProviderError(
            code=ErrorCode.CONTENT_FILTER,
            message=CONTENT_FILTER_ERROR,
            provider=self.provider_name,
            model=self._model_id,
        )

    def _parse_response(self, data: Any) -> ChatResult:
        if not isinstance(data, Mapping):
            raise protocol_error(self.display_name, self.provider_name, "unexpected response body")
        if (msg := embedded_error_message(data)) is not None:
            raise ProviderError(
                code=ErrorCode.UNKNOWN,
                message=f"{self.display_name} API error: {msg}",
                provider=self.provider_name,
            )
        content, finish_reason = extract_openai_text(data)
        if content is None:
            raise protocol_error(self.display_name, self.provider_name, "no choices in response")
        if finish_reason == CONTENT_FILTER_REASON and not content:
            raise self._content_filter_error()
        return ChatResult(model=self._model_id, content=content, usage=extract_usage(data))

    def _handle_event(self, event: StreamEvent, metrics: StreamMetrics) -> Optional[str]:
        data = event.data
        if not isinstance(data, Mapping):
            return None
        if (msg := embedded_error_message(data)) is not None:
            metrics.fail(f"{self.display_name} API error: {msg}", ErrorCode.UNKNOWN.value)
            return None
        metrics.record_usage(extract_usage(data))
        text, finish_reason = translate_openai_chunk(data)
        if finish_reason:
            metrics.finish_reason = finish_reason
            metrics.terminal = True
            if finish_reason == CONTENT_FILTER_REASON and not text and metrics.emitted == 0:
                self._fail_event(metrics, self._content_filter_error())
        return text


__all__ = ["BaseOpenAIStyleProvider"]
