"""Aggregation engine: fan one conversation out to many models.

``AggregationEngine`` owns a pre-resolved ``{model_id: secret}`` map and
serves two dispatch modes:

``dispatch_batch``
    One concurrent ``generate`` call per requested model. Returns one
    ``ChatResult`` per requested model in request order.

``dispatch_stream``
    One generator per streaming-capable model (batch-only models are wrapped
    into a single terminal chunk). All generators are pulled concurrently;
    each pending pull is a task and the engine waits on all of them at once
    (``asyncio.wait(..., FIRST_COMPLETED)``), yielding chunks in the order
    they resolve. Per-model order is preserved; a model is retired on its
    ``done`` chunk.

Failure isolation: a model without a credential, an adapter that fails, or a
generator that ends abruptly each produce an error value for that model only.
The single exception the engine raises is ``ValueError`` for an invalid
conversation, before any provider is contacted.

Both modes share a ``DispatchSupervisor``: when the wall-clock ceiling
passes or the caller's ``CancellationToken`` fires, every in-flight pull is
cancelled (closing its HTTP stream), and each still-active model receives a
forced terminal value.
"""

from __future__ import annotations

import asyncio
import dataclasses
import uuid
from typing import AsyncIterator, Dict, Iterable, List, Mapping, Optional, Set

import httpx

from ..base.cancellation import CancellationToken
from ..base.constants import EMPTY_STREAM_ERROR, NO_API_KEY_TEMPLATE
from ..base.errors import ErrorCode, classify_exception
from ..base.factory import ProviderFactory
from ..base.interfaces import LLMProvider, SupportsStreaming
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ChatRequest, ChatResult, Message, StreamChunk
from ..base.timeouts import TimeoutConfig, get_timeout_config
from ..base.utils.messages import coerce_messages
from .capabilities import CapabilityRouter
from .registry import build_registry
from .supervisor import DispatchSupervisor, TerminationReason


def not_configured_error(model: str) -> str:
    return NO_API_KEY_TEMPLATE.format(model=model)


async def _pull(agen: AsyncIterator[StreamChunk]) -> Optional[StreamChunk]:
    """Await the next chunk; ``None`` once the generator is exhausted."""
    try:
        return await agen.__anext__()
    except StopAsyncIteration:
        return None


async def _batch_as_stream(adapter: LLMProvider, request: ChatRequest) -> AsyncIterator[StreamChunk]:
    """Present a single-shot call as exactly one terminal chunk."""
    result = await adapter.generate(request)
    yield StreamChunk(
        model=request.model,
        content=result.content if result.error is None else "",
        done=True,
        usage=result.usage,
        error=result.error,
        error_code=result.error_code,
    )


class AggregationEngine:
    """Dispatch one conversation to several models concurrently.

    Parameters
    ----------
    credentials:
        Pre-resolved ``{model_id: secret}`` map (see
        ``chorus_providers.config.credentials.resolve_credentials``).
    router:
        Capability classification; built from configuration when omitted.
    timeout_seconds:
        Wall-clock ceiling of one dispatch; defaults to
        ``get_timeout_config().dispatch_timeout_seconds`` (30 s). A value
        that is not positive raises ``ValueError``.
    transport:
        httpx transport handed to every adapter (tests inject
        ``httpx.MockTransport``).
    timeout_config:
        Connect/read timeouts for adapter HTTP clients.
    """

    def __init__(
        self,
        credentials: Mapping[str, Optional[str]],
        *,
        router: Optional[CapabilityRouter] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_config: Optional[TimeoutConfig] = None,
    ) -> None:
        self._credentials: Dict[str, str] = {
            model: secret.strip() for model, secret in credentials.items() if secret and secret.strip()
        }
        self._router = router
        self._timeout_config = timeout_config
        cfg = timeout_config or get_timeout_config()
        if timeout_seconds is None:
            self._timeout_seconds = cfg.dispatch_timeout_seconds
        else:
            self._timeout_seconds = float(timeout_seconds)
            if self._timeout_seconds <= 0:
                raise ValueError(f"timeout_seconds must be greater than zero, got {timeout_seconds!r}")
        self._transport = transport
        self._logger = get_logger("providers.aggregation")

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def list_configured_models(self) -> Set[str]:
        """Return the model ids currently backed by a credential and an adapter."""
        supported = set(ProviderFactory.supported())
        return {model for model in self._credentials if model in supported}

    def _build_registry(self) -> Dict[str, LLMProvider]:
        return build_registry(self._credentials, transport=self._transport, timeout=self._timeout_config)

    def _start(self, mode: str, models: List[str], token: Optional[CancellationToken]) -> DispatchSupervisor:
        ctx = LogContext(dispatch_id=uuid.uuid4().hex[:12], mode=mode)
        log_event(
            self._logger,
            "dispatch.start",
            ctx,
            models=models,
            timeout_s=self._timeout_seconds,
        )
        return DispatchSupervisor(self._timeout_seconds, token, logger=self._logger, ctx=ctx)

    def _finish(self, supervisor: DispatchSupervisor, *, errors: int, total: int) -> None:
        supervisor.complete()
        log_event(
            self._logger,
            "dispatch.end",
            supervisor.ctx,
            models=total,
            errors=errors,
            forced=supervisor.reason.value if supervisor.reason else None,
            elapsed_s=round(supervisor.elapsed(), 3),
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------
    async def dispatch_batch(
        self,
        models: Iterable[str],
        messages: Iterable[Message | Mapping[str, str]],
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> List[ChatResult]:
        """Query every model once and return results in request order.

        Raises
        ------
        ValueError
            When ``messages`` is empty or malformed.
        """
        conversation = coerce_messages(messages)
        model_list = list(models)
        registry = self._build_registry()
        supervisor = self._start("batch", model_list, cancellation_token)

        results: List[Optional[ChatResult]] = [None] * len(model_list)
        tasks: Dict[asyncio.Task, int] = {}
        for idx, model_id in enumerate(model_list):
            adapter = registry.get(model_id)
            if adapter is None:
                results[idx] = ChatResult.failure(
                    model_id, not_configured_error(model_id), ErrorCode.NOT_CONFIGURED.value
                )
                continue
            request = ChatRequest(
                model=model_id,
                messages=list(conversation),
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            )
            tasks[asyncio.ensure_future(adapter.generate(request))] = idx

        pending: Set[asyncio.Task] = set(tasks)
        cancel_waiter = asyncio.ensure_future(supervisor.wait_cancelled())
        try:
            while pending and supervisor.check() is None:
                done, _ = await asyncio.wait(
                    pending | {cancel_waiter},
                    timeout=supervisor.remaining(),
                    return_when=asyncio.FIRST_COMPLETED,
                )
                for task in done:
                    if task is cancel_waiter:
                        continue
                    pending.discard(task)
                    idx = tasks[task]
                    results[idx] = self._result_from_task(task, model_list[idx])
            if pending:
                reason = supervisor.check() or TerminationReason.TIMEOUT
                supervisor.terminate(reason, active=len(pending))
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                for task in pending:
                    idx = tasks[task]
                    results[idx] = supervisor.forced_result(model_list[idx])
                pending.clear()
        finally:
            cancel_waiter.cancel()
            for task in pending:
                task.cancel()
            await asyncio.gather(cancel_waiter, *pending, return_exceptions=True)
            final = [r for r in results if r is not None]
            self._finish(supervisor, errors=sum(1 for r in final if not r.ok), total=len(model_list))
        return [r for r in results if r is not None]

    @staticmethod
    def _result_from_task(task: asyncio.Task, model: str) -> ChatResult:
        if task.cancelled():
            return ChatResult.failure(model, f"{model} call was cancelled", ErrorCode.CANCELLED.value)
        exc = task.exception()
        if exc is not None:
            return ChatResult.failure(model, f"{model} failed: {exc}", classify_exception(exc).value)
        result: ChatResult = task.result()
        if result.model != model:
            result = dataclasses.replace(result, model=model)
        return result

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------
    def dispatch_stream(
        self,
        models: Iterable[str],
        messages: Iterable[Message | Mapping[str, str]],
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamChunk]:
        """Return the merged chunk stream for ``models``.

        The conversation is validated immediately (``ValueError``); the
        returned async iterator then yields every model's chunks, ending
        once each requested model has produced exactly one terminal chunk.
        Duplicate ids are served once.
        """
        conversation = coerce_messages(messages)
        model_list = list(dict.fromkeys(models))
        return self._stream(model_list, conversation, temperature, max_output_tokens, cancellation_token)

    async def _stream(
        self,
        model_list: List[str],
        conversation: List[Message],
        temperature: Optional[float],
        max_output_tokens: Optional[int],
        cancellation_token: Optional[CancellationToken],
    ) -> AsyncIterator[StreamChunk]:
        registry = self._build_registry()
        router = self._router or CapabilityRouter()
        supervisor = self._start("stream", model_list, cancellation_token)
        errors = 0
        sources: Dict[str, AsyncIterator[StreamChunk]] = {}
        pulls: Dict[asyncio.Task, str] = {}
        cancel_waiter: Optional[asyncio.Future] = None
        try:
            configured: List[str] = []
            for model_id in model_list:
                if model_id in registry:
                    configured.append(model_id)
                    continue
                errors += 1
                yield StreamChunk.terminal(
                    model_id, error=not_configured_error(model_id), error_code=ErrorCode.NOT_CONFIGURED.value
                )

            streaming, batch_only = router.partition(configured)
            for model_id in configured:
                adapter = registry[model_id]
                request = ChatRequest(
                    model=model_id,
                    messages=list(conversation),
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                    stream=True,
                )
                if model_id in streaming and isinstance(adapter, SupportsStreaming) and adapter.supports_streaming():
                    sources[model_id] = adapter.stream(request)
                else:
                    sources[model_id] = _batch_as_stream(adapter, request)
            log_event(
                self._logger,
                "dispatch.partition",
                supervisor.ctx,
                streaming=[m for m in configured if m in streaming],
                batch_only=batch_only,
            )

            emitted: Dict[str, bool] = {model_id: False for model_id in sources}
            for model_id, agen in sources.items():
                pulls[asyncio.ensure_future(_pull(agen))] = model_id
            cancel_waiter = asyncio.ensure_future(supervisor.wait_cancelled())

            while pulls and supervisor.check() is None:
                done, _ = await asyncio.wait(
                    set(pulls) | {cancel_waiter},
                    timeout=supervisor.remaining(),
                    return_when=asyncio.FIRST_COMPLETED,
                )
                for task in done:
                    if task is cancel_waiter or supervisor.check() is not None:
                        continue
                    model_id = pulls.pop(task)
                    chunk = self._chunk_from_task(task, model_id, emitted[model_id])
                    if chunk.content:
                        emitted[model_id] = True
                    if chunk.done:
                        await sources.pop(model_id).aclose()
                        if chunk.error is not None:
                            errors += 1
                    else:
                        pulls[asyncio.ensure_future(_pull(sources[model_id]))] = model_id
                    yield chunk

            if pulls:
                reason = supervisor.check() or TerminationReason.TIMEOUT
                supervisor.terminate(reason, active=len(pulls))
                forced = list(pulls.values())
                await self._release(pulls, sources)
                for model_id in forced:
                    errors += 1
                    yield supervisor.forced_chunk(model_id)
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()
            await self._release(pulls, sources)
            self._finish(supervisor, errors=errors, total=len(model_list))

    @staticmethod
    async def _release(
        pulls: Dict[asyncio.Task, str],
        sources: Dict[str, AsyncIterator[StreamChunk]],
    ) -> None:
        """Cancel in-flight pulls, then close every remaining generator."""
        tasks = list(pulls)
        pulls.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        agens = list(sources.values())
        sources.clear()
        for agen in agens:
            await agen.aclose()

    @staticmethod
    def _chunk_from_task(task: asyncio.Task, model: str, emitted_before: bool) -> StreamChunk:
        if task.cancelled():
            return StreamChunk.terminal(model, error=f"{model} stream was cancelled", error_code=ErrorCode.CANCELLED.value)
        exc = task.exception()
        if exc is not None:
            return StreamChunk.terminal(
                model, error=f"{model} stream failed: {exc}", error_code=classify_exception(exc).value
            )
        chunk: Optional[StreamChunk] = task.result()
        if chunk is None:
            # Generator ended without a terminal chunk.
            if emitted_before:
                return StreamChunk.terminal(model)
            return StreamChunk.terminal(model, error=EMPTY_STREAM_ERROR, error_code=ErrorCode.PROTOCOL.value)
        if chunk.model != model:
            chunk = dataclasses.replace(chunk, model=model)
        return chunk


__all__ = ["AggregationEngine", "not_configured_error"]
