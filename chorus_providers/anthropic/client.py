"""AnthropicProvider adapter.

Speaks the Anthropic Messages API over httpx:

* ``x-api-key`` and ``anthropic-version`` headers.
* System prompt in the top-level ``system`` field.
* Streaming as named SSE events (see ``stream_helpers``).
* Stop reason ``refusal`` is reported as a content-policy error.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import httpx

from ..base.constants import CONTENT_FILTER_ERROR
from ..base.errors import ErrorCode, ProviderError
from ..base.http_provider_parts import BaseHTTPProvider, protocol_error, provider_init_from_config
from ..base.models import ChatRequest, ChatResult
from ..base.streaming import Framing, StreamEvent, StreamMetrics
from ..base.timeouts import TimeoutConfig
from ..config import get_provider_config
from .helpers import (
    REFUSAL_STOP_REASON,
    build_message_params,
    error_code_for_type,
    extract_text,
    extract_usage,
)
from .stream_helpers import event_type, translate_stream_event


class AnthropicProvider(BaseHTTPProvider):
    """Anthropic Messages API adapter bound to one canonical model id.

    Parameters:
        api_key: Anthropic API key.
        model_id: Canonical id reported on results (default ``"claude-4"``).
        model: Wire model override; defaults to provider config.
        base_url: API root override; defaults to provider config.
        streaming: Force streaming on/off; defaults to provider config.
        transport: httpx transport override (tests).
        timeout: Explicit timeout configuration.
    """

    framing = Framing.SSE
    display_name = "Anthropic"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model_id: str = "claude-4",
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        streaming: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[TimeoutConfig] = None,
        api_version: Optional[str] = None,
    ) -> None:
        super().__init__(
            provider_init_from_config(
                "anthropic",
                model_id=model_id,
                api_key=api_key,
                model=model,
                base_url=base_url,
                streaming=streaming,
                transport=transport,
                timeout=timeout,
            )
        )
        self._api_version = api_version or get_provider_config("anthropic")["api_version"]

    @property
    def provider_name(self) -> str:
        return "anthropic"

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self._api_key or "",
            "anthropic-version": self._api_version,
            "Content-Type": "application/json",
        }

    def _endpoint(self, stream: bool) -> str:
        return "/messages"

    def _build_payload(self, request: ChatRequest, stream: bool) -> Dict[str, Any]:
        return build_message_params(request, self._wire_model, stream=stream)

    def _refusal_error(self) -> ProviderError:
        return ProviderError(
            code=ErrorCode.CONTENT_FILTER,
            message=CONTENT_FILTER_ERROR,
            provider=self.provider_name,
            model=self._model_id,
        )

    def _api_error(self, data: Mapping[str, Any]) -> ProviderError:
        err = data.get("error") if isinstance(data.get("error"), Mapping) else {}
        err_type = err.get("type")
        message = err.get("message") or err_type or "unknown error"
        return ProviderError(
            code=error_code_for_type(err_type),
            message=f"Anthropic API error: {err_type}: {message}" if err_type else f"Anthropic API error: {message}",
            provider=self.provider_name,
            model=self._model_id,
        )

    def _parse_response(self, data: Any) -> ChatResult:
        if not isinstance(data, Mapping):
            raise protocol_error(self.display_name, self.provider_name, "unexpected response body")
        if data.get("type") == "error" or "error" in data:
            raise self._api_error(data)
        if "content" not in data:
            raise protocol_error(self.display_name, self.provider_name, "no content in response")
        text = extract_text(data)
        if data.get("stop_reason") == REFUSAL_STOP_REASON and not text:
            raise self._refusal_error()
        return ChatResult(model=self._model_id, content=text, usage=extract_usage(data.get("usage")))

    def _handle_event(self, event: StreamEvent, metrics: StreamMetrics) -> Optional[str]:
        if event_type(event) == "error":
            data = event.data if isinstance(event.data, Mapping) else {}
            self._fail_event(metrics, self._api_error(data))
            return None
        text = translate_stream_event(event, metrics)
        if metrics.finish_reason == REFUSAL_STOP_REASON:
            self._fail_event(metrics, self._refusal_error())
        return text


__all__ = ["AnthropicProvider"]
