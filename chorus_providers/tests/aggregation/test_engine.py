"""AggregationEngine: ordering, failure isolation, timeouts, cancellation."""
from __future__ import annotations

import asyncio
import time
from typing import List

import pytest

from chorus_providers.aggregation import AggregationEngine, Capability, CapabilityRouter
from chorus_providers.base.cancellation import CancellationToken
from chorus_providers.base.constants import CANCELLED_ERROR
from chorus_providers.base.models import StreamChunk
from chorus_providers.base.streaming import accumulate_chunks, group_by_model

from .fake_providers import FakeProviders

KEY = "sk-live-key"
ALL = ["gpt-5", "claude-4", "gemini-2.5-pro", "grok-4", "deepseek"]
MESSAGES = [{"role": "system", "content": "be nice"}, {"role": "user", "content": "hello"}]


def _engine(fake: FakeProviders, models=ALL, **kwargs) -> AggregationEngine:
    return AggregationEngine({m: KEY for m in models}, transport=fake.transport(), **kwargs)


async def _drain(agen) -> List[StreamChunk]:
    return [chunk async for chunk in agen]


@pytest.mark.asyncio
async def test_batch_results_follow_request_order():
    fake = FakeProviders()
    engine = _engine(fake)
    order = ["deepseek", "gpt-5", "gemini-2.5-pro", "claude-4", "grok-4"]
    results = await engine.dispatch_batch(order, MESSAGES)
    assert [r.model for r in results] == order  # nosec B101
    assert all(r.ok for r in results)  # nosec B101
    by_model = {r.model: r.content for r in results}
    assert by_model["gpt-5"] == "Hello from GPT"  # nosec B101
    assert by_model["claude-4"] == "Hi from Claude"  # nosec B101
    assert by_model["gemini-2.5-pro"] == "Gemini says hi"  # nosec B101


@pytest.mark.asyncio
async def test_batch_missing_credential_is_not_configured():
    fake = FakeProviders()
    engine = _engine(fake, models=["gpt-5"])
    results = await engine.dispatch_batch(["claude-4", "gpt-5", "unknown-model"], MESSAGES)
    assert [r.model for r in results] == ["claude-4", "gpt-5", "unknown-model"]  # nosec B101
    assert results[0].error == "No API key configured for claude-4"  # nosec B101
    assert results[0].error_code == "not_configured"  # nosec B101
    assert results[1].ok  # nosec B101
    assert results[2].error_code == "not_configured"  # nosec B101
    assert {r.url.host for r in fake.requests} == {"api.openai.com"}  # nosec B101


@pytest.mark.asyncio
async def test_batch_failure_is_isolated():
    fake = FakeProviders(fail={"api.anthropic.com": 500})
    results = await _engine(fake).dispatch_batch(["gpt-5", "claude-4"], MESSAGES)
    assert results[0].ok  # nosec B101
    assert results[1].error.startswith("Anthropic API error: 500")  # nosec B101
    assert results[1].error_code == "server_error"  # nosec B101


@pytest.mark.asyncio
async def test_batch_duplicates_served_per_occurrence():
    fake = FakeProviders()
    results = await _engine(fake).dispatch_batch(["gpt-5", "gpt-5"], MESSAGES)
    assert [r.model for r in results] == ["gpt-5", "gpt-5"]  # nosec B101
    assert all(r.content == "Hello from GPT" for r in results)  # nosec B101


@pytest.mark.asyncio
async def test_batch_timeout_forces_terminal_for_hung_model(log_records):
    fake = FakeProviders(hang={"api.openai.com"})
    engine = _engine(fake, timeout_seconds=0.2)
    started = time.monotonic()
    results = await engine.dispatch_batch(["gpt-5", "claude-4"], MESSAGES)
    assert time.monotonic() - started < 2.0  # nosec B101
    assert results[0].error == "gpt-5 timed out after 0.2s"  # nosec B101
    assert results[0].error_code == "timeout"  # nosec B101
    assert results[1].content == "Hi from Claude"  # nosec B101
    assert log_records.events("dispatch.timeout")[0]["active_models"] == 1  # nosec B101


@pytest.mark.asyncio
async def test_batch_cancellation():
    fake = FakeProviders(hang={"api.openai.com", "api.anthropic.com"})
    token = CancellationToken()
    asyncio.get_running_loop().call_later(0.05, token.cancel, "user left")
    results = await _engine(fake, timeout_seconds=5).dispatch_batch(
        ["gpt-5", "claude-4"], MESSAGES, cancellation_token=token
    )
    assert [r.error for r in results] == [CANCELLED_ERROR, CANCELLED_ERROR]  # nosec B101
    assert {r.error_code for r in results} == {"cancelled"}  # nosec B101


@pytest.mark.asyncio
async def test_empty_conversation_raises_before_any_call():
    fake = FakeProviders()
    engine = _engine(fake)
    with pytest.raises(ValueError):
        await engine.dispatch_batch(["gpt-5"], [])
    with pytest.raises(ValueError):
        engine.dispatch_stream(["gpt-5"], [{"role": "robot", "content": "x"}])
    assert fake.requests == []  # nosec B101


@pytest.mark.asyncio
async def test_stream_merges_models_and_matches_batch():
    fake = FakeProviders(delay={"api.anthropic.com": 0.01})
    engine = _engine(fake)
    chunks = await _drain(engine.dispatch_stream(ALL, MESSAGES))
    grouped = group_by_model(chunks)
    assert set(grouped) == set(ALL)  # nosec B101
    for model, seq in grouped.items():
        assert sum(1 for c in seq if c.done) == 1, model  # nosec B101
        assert seq[-1].done  # nosec B101
    batch = await _engine(FakeProviders()).dispatch_batch(ALL, MESSAGES)
    for result in batch:
        assert accumulate_chunks(grouped[result.model]).content == result.content  # nosec B101
    assert fake.was_streamed("api.openai.com") and fake.was_streamed("generativelanguage.googleapis.com")  # nosec B101


@pytest.mark.asyncio
async def test_stream_not_configured_first_and_deduplicated():
    fake = FakeProviders()
    engine = _engine(fake, models=["gpt-5"])
    chunks = await _drain(engine.dispatch_stream(["gpt-5", "claude-4", "gpt-5"], MESSAGES))
    assert chunks[0].model == "claude-4" and chunks[0].done  # nosec B101
    assert chunks[0].error_code == "not_configured"  # nosec B101
    gpt = [c for c in chunks if c.model == "gpt-5"]
    assert "".join(c.content for c in gpt) == "Hello from GPT"  # nosec B101
    assert sum(1 for c in gpt if c.done) == 1  # nosec B101


@pytest.mark.asyncio
async def test_stream_batch_only_model_is_one_terminal_chunk():
    fake = FakeProviders()
    router = CapabilityRouter({"gpt-5": Capability.BATCH_ONLY, "claude-4": Capability.STREAMING})
    engine = _engine(fake, models=["gpt-5", "claude-4"], router=router)
    chunks = await _drain(engine.dispatch_stream(["gpt-5", "claude-4"], MESSAGES))
    gpt = [c for c in chunks if c.model == "gpt-5"]
    assert len(gpt) == 1  # nosec B101
    assert gpt[0].done and gpt[0].content == "Hello from GPT" and gpt[0].error is None  # nosec B101
    assert not fake.was_streamed("api.openai.com")  # nosec B101
    assert fake.was_streamed("api.anthropic.com")  # nosec B101


@pytest.mark.asyncio
async def test_stream_failure_is_isolated():
    fake = FakeProviders(fail={"api.x.ai": 503})
    chunks = await _drain(_engine(fake).dispatch_stream(["grok-4", "deepseek"], MESSAGES))
    grok = [c for c in chunks if c.model == "grok-4"]
    assert len(grok) == 1 and grok[0].error_code == "unavailable"  # nosec B101
    assert accumulate_chunks([c for c in chunks if c.model == "deepseek"]).content == "DeepSeek"  # nosec B101


@pytest.mark.asyncio
async def test_stream_timeout_closes_stalled_stream(log_records):
    fake = FakeProviders(stall_after_first={"api.openai.com"})
    engine = _engine(fake, models=["gpt-5", "deepseek"], timeout_seconds=0.3)
    started = time.monotonic()
    chunks = await _drain(engine.dispatch_stream(["gpt-5", "deepseek"], MESSAGES))
    assert time.monotonic() - started < 2.0  # nosec B101
    gpt = [c for c in chunks if c.model == "gpt-5"]
    assert [c.content for c in gpt] == ["Hel", ""]  # nosec B101
    assert gpt[-1].error == "gpt-5 timed out after 0.3s" and gpt[-1].error_code == "timeout"  # nosec B101
    assert chunks[-1] is gpt[-1]  # nosec B101
    assert accumulate_chunks([c for c in chunks if c.model == "deepseek"]).ok  # nosec B101
    assert fake.streams["api.openai.com"].closed  # nosec B101
    end = log_records.events("dispatch.end")[-1]
    assert end["forced"] == "timeout" and end["errors"] == 1  # nosec B101


@pytest.mark.asyncio
async def test_stream_cancellation_reports_cancelled():
    fake = FakeProviders(stall_after_first={"api.openai.com"})
    token = CancellationToken()
    engine = _engine(fake, models=["gpt-5"], timeout_seconds=5)
    seen: List[StreamChunk] = []
    async for chunk in engine.dispatch_stream(["gpt-5"], MESSAGES, cancellation_token=token):
        seen.append(chunk)
        if chunk.content:
            token.cancel("client disconnected")
    assert seen[-1].error == CANCELLED_ERROR and seen[-1].error_code == "cancelled"  # nosec B101
    assert fake.streams["api.openai.com"].closed  # nosec B101


@pytest.mark.asyncio
async def test_stream_consumer_can_stop_early(log_records):
    fake = FakeProviders(stall_after_first={"api.openai.com"})
    agen = _engine(fake, models=["gpt-5"]).dispatch_stream(["gpt-5"], MESSAGES)
    first = await agen.__anext__()
    assert first.content == "Hel"  # nosec B101
    await agen.aclose()
    assert fake.streams["api.openai.com"].closed  # nosec B101
    assert log_records.events("dispatch.end")  # nosec B101


def test_list_configured_models():
    engine = AggregationEngine({"gpt-5": KEY, "claude-4": "  ", "mystery": KEY})
    assert engine.list_configured_models() == {"gpt-5"}  # nosec B101
    assert engine.timeout_seconds == 30.0  # nosec B101


def test_timeout_must_be_positive():
    assert AggregationEngine({}, timeout_seconds=0.5).timeout_seconds == 0.5  # nosec B101
    for bad in (0, -1.0):
        with pytest.raises(ValueError, match="greater than zero"):
            AggregationEngine({}, timeout_seconds=bad)


@pytest.mark.asyncio
async def test_batch_cancelled_from_outside_awaits_adapter_calls(log_records):
    fake = FakeProviders(hang={"api.openai.com"})
    engine = _engine(fake, models=["gpt-5", "grok-4"])
    dispatch = asyncio.create_task(engine.dispatch_batch(["gpt-5", "grok-4"], MESSAGES))
    while len(fake.requests) < 2:
        await asyncio.sleep(0.01)
    dispatch.cancel()
    with pytest.raises(asyncio.CancelledError):
        await dispatch
    assert asyncio.all_tasks() == {asyncio.current_task()}  # nosec B101
    assert log_records.events("dispatch.end")  # nosec B101
