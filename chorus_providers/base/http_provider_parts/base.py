"""BaseHTTPProvider: shared request/stream orchestration for HTTP adapters.

Purpose:
- Provide a reusable base class that owns everything an adapter does that is
  not provider-specific: client lifetime, status handling, framing, per-call
  stream state, terminal chunk construction and structured logging.

Subclasses supply the provider-specific translation:
- ``provider_name`` / ``display_name``
- ``_headers()``
- ``_endpoint(stream)`` and optionally ``_query_params(stream)``
- ``_build_payload(request, stream)``
- ``_parse_response(data)`` for batch bodies
- ``_handle_event(event, metrics)`` for decoded stream events

Failure semantics:
- ``generate`` never raises; failures come back as ``ChatResult.error``.
- ``stream`` never raises; failures come back as a terminal error chunk.
- ``asyncio.CancelledError`` is the exception to both rules: it propagates so
  the caller's cancellation unwinds the open response and closes its socket.

Timeout strategy:
- httpx bounds connects and idle reads (``get_timeout_config``); the overall
  dispatch ceiling belongs to the aggregation supervisor.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ..errors import ErrorCode, ProviderError
from ..http import open_client
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import ChatRequest, ChatResult, StreamChunk
from ..streaming import Framing, StreamEvent, StreamMetrics, finalize_stream, iter_stream_events, streaming_supported
from .helpers import exception_to_error, http_status_error, protocol_error
from .provider_init import _ProviderInit


class BaseHTTPProvider:
    """Reusable base class for provider adapters speaking JSON over HTTP."""

    framing: Framing = Framing.SSE
    display_name: str = "Provider"

    def __init__(self, init: _ProviderInit) -> None:
        self._api_key = (init.api_key or "").strip() or None
        self._model_id = init.model_id
        self._wire_model = init.wire_model
        self._base_url = init.base_url.rstrip("/")
        self._streaming_enabled = init.streaming_enabled
        self._transport = init.transport
        self._timeout = init.timeout
        self._logger = get_logger(init.logger_name)

    # ----- Abstract surface -----
    @property
    def provider_name(self) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def _headers(self) -> Dict[str, str]:  # pragma: no cover - abstract
        raise NotImplementedError

    def _endpoint(self, stream: bool) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def _build_payload(self, request: ChatRequest, stream: bool) -> Dict[str, Any]:  # pragma: no cover - abstract
        raise NotImplementedError

    def _parse_response(self, data: Any) -> ChatResult:  # pragma: no cover - abstract
        raise NotImplementedError

    def _handle_event(self, event: StreamEvent, metrics: StreamMetrics) -> Optional[str]:  # pragma: no cover - abstract
        """Apply one decoded event to ``metrics`` and return its text delta."""
        raise NotImplementedError

    def _query_params(self, stream: bool) -> Dict[str, str]:
        return {}

    # ----- Basic info -----
    @property
    def model(self) -> str:
        """Canonical model id this adapter is bound to."""
        return self._model_id

    @property
    def wire_model(self) -> str:
        return self._wire_model

    def supports_streaming(self) -> bool:
        return streaming_supported(
            require_api_key=True,
            api_key_getter=lambda: self._api_key,
            enabled=self._streaming_enabled,
        )

    # ----- Batch -----
    async def generate(self, request: ChatRequest) -> ChatResult:
        """Perform one non-streaming call and normalize the outcome."""
        ctx = self._ctx()
        normalized_log_event(
            self._logger,
            "chat.start",
            ctx,
            phase="start",
            attempt=None,
            emitted=False,
            tokens=None,
            message_count=len(request.messages),
        )
        try:
            self._check_request(request)
            result = await self._post_json(request)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001 - every failure becomes a result
            err = exception_to_error(self.display_name, self.provider_name, exc)
            normalized_log_event(
                self._logger,
                "chat.error",
                ctx,
                phase="finalize",
                attempt=None,
                error_code=err.code.value,
                emitted=False,
                tokens=None,
                error=err.message,
                status=err.status,
            )
            return ChatResult.failure(self._model_id, err.message, err.code.value)
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            attempt=None,
            error_code=result.error_code,
            emitted=bool(result.content),
            tokens=result.usage,
            error=result.error,
        )
        return result

    async def _post_json(self, request: ChatRequest) -> ChatResult:
        payload = self._build_payload(request, stream=False)
        async with open_client(
            base_url=self._base_url,
            headers=self._headers(),
            transport=self._transport,
            timeout=self._timeout,
        ) as client:
            resp = await client.post(
                self._endpoint(stream=False),
                json=payload,
                params=self._query_params(stream=False) or None,
            )
            if resp.status_code >= 400:
                raise http_status_error(
                    self.display_name, self.provider_name, resp.status_code, resp.reason_phrase, resp.text
                )
            try:
                data = resp.json()
            except ValueError as exc:
                raise protocol_error(self.display_name, self.provider_name, "invalid JSON response") from exc
        result = self._parse_response(data)
        result.model = self._model_id
        return result

    # ----- Streaming -----
    async def stream(self, request: ChatRequest) -> AsyncIterator[StreamChunk]:
        """Stream one call as chunks: deltas, then exactly one terminal chunk."""
        ctx = self._ctx()
        metrics = StreamMetrics()
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            attempt=None,
            emitted=False,
            tokens=None,
            message_count=len(request.messages),
        )
        try:
            self._check_request(request)
            async with open_client(
                base_url=self._base_url,
                headers=self._headers(),
                transport=self._transport,
                timeout=self._timeout,
            ) as client:
                async with client.stream(
                    "POST",
                    self._endpoint(stream=True),
                    json=self._build_payload(request, stream=True),
                    params=self._query_params(stream=True) or None,
                ) as resp:
                    await self._raise_for_stream_status(resp)
                    async for event in iter_stream_events(
                        resp.aiter_bytes(), self.framing, logger=self._logger, ctx=ctx
                    ):
                        if event.is_done:
                            metrics.terminal = True
                            break
                        delta = self._handle_event(event, metrics)
                        if delta:
                            metrics.record_delta(delta)
                            yield StreamChunk(model=self._model_id, content=delta)
                        if metrics.error is not None:
                            break
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001 - every failure becomes a terminal chunk
            err = exception_to_error(self.display_name, self.provider_name, exc)
            metrics.fail(err.message, err.code.value)
        yield finalize_stream(logger=self._logger, ctx=ctx, model=self._model_id, metrics=metrics)

    async def _raise_for_stream_status(self, resp: httpx.Response) -> None:
        if resp.status_code < 400:
            return
        body = (await resp.aread()).decode("utf-8", errors="replace")
        raise http_status_error(self.display_name, self.provider_name, resp.status_code, resp.reason_phrase, body)

    # ----- helpers -----
    def _check_request(self, request: ChatRequest) -> None:
        if not request.messages:
            raise ProviderError(
                code=ErrorCode.VALIDATION,
                message="messages must be a non-empty list",
                provider=self.provider_name,
                model=self._model_id,
            )
        if request.model and request.model != self._model_id:
            raise ProviderError(
                code=ErrorCode.VALIDATION,
                message=f"request for '{request.model}' sent to the '{self._model_id}' adapter",
                provider=self.provider_name,
                model=self._model_id,
            )

    def _ctx(self) -> LogContext:
        return LogContext(provider=self.provider_name, model=self._model_id, extra={"wire_model": self._wire_model})

    def _fail_event(self, metrics: StreamMetrics, err: ProviderError) -> None:
        metrics.fail(err.message, err.code.value)


__all__ = ["BaseHTTPProvider"]
