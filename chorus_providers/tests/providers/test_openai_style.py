"""OpenAI-compatible adapters (OpenAI, xAI, DeepSeek) over a mock transport."""
from __future__ import annotations

import httpx
import pytest

from chorus_providers.base.constants import CONTENT_FILTER_ERROR, EMPTY_STREAM_ERROR
from chorus_providers.base.models import ChatRequest, Message, TokenUsage
from chorus_providers.deepseek import DeepseekProvider
from chorus_providers.openai import OpenAIProvider
from chorus_providers.xai import XAIProvider

from ..helpers import Recorder, json_transport, sse_body, stream_transport

KEY = "sk-live-123"


def _request(model: str = "gpt-5", **kwargs) -> ChatRequest:
    return ChatRequest(
        model=model,
        messages=[Message("system", "be brief"), Message("user", "hello")],
        **kwargs,
    )


def _completion(content="Hi there", finish="stop", usage=None):
    body = {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": finish}]}
    if usage is not None:
        body["usage"] = usage
    return body


async def _collect(provider, request):
    return [chunk async for chunk in provider.stream(request)]


@pytest.mark.asyncio
async def test_generate_success_and_request_shape():
    rec = json_transport(_completion(usage={"prompt_tokens": 5, "completion_tokens": 3, "total_tokens": 8}))
    provider = OpenAIProvider(KEY, transport=rec.transport())
    result = await provider.generate(_request())
    assert result.ok and result.content == "Hi there"  # nosec B101
    assert result.model == "gpt-5"  # nosec B101
    assert result.usage == TokenUsage(5, 3, 8)  # nosec B101

    sent = rec.requests[0]
    assert str(sent.url) == "https://api.openai.com/v1/chat/completions"  # nosec B101
    assert sent.headers["authorization"] == f"Bearer {KEY}"  # nosec B101
    body = rec.last_json
    assert body["model"] == "gpt-4o"  # nosec B101
    assert body["messages"][0] == {"role": "system", "content": "be brief"}  # nosec B101
    assert body["temperature"] == 0.7 and body["max_tokens"] == 2000  # nosec B101
    assert "stream" not in body  # nosec B101


@pytest.mark.asyncio
async def test_explicit_zero_values_are_sent():
    rec = json_transport(_completion())
    provider = OpenAIProvider(KEY, transport=rec.transport())
    await provider.generate(_request(temperature=0.0, max_output_tokens=0))
    assert rec.last_json["temperature"] == 0.0  # nosec B101
    assert rec.last_json["max_tokens"] == 0  # nosec B101


@pytest.mark.asyncio
async def test_http_error_includes_status_and_body():
    rec = json_transport({"error": {"message": "invalid key"}}, status=401)
    result = await OpenAIProvider(KEY, transport=rec.transport()).generate(_request())
    assert result.content == ""  # nosec B101
    assert result.error.startswith("OpenAI API error: 401 Unauthorized - ")  # nosec B101
    assert "invalid key" in result.error  # nosec B101
    assert result.error_code == "auth"  # nosec B101


@pytest.mark.asyncio
async def test_invalid_json_body_is_an_error_value():
    rec = Recorder(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    result = await OpenAIProvider(KEY, transport=rec.transport()).generate(_request())
    assert result.error == "OpenAI API error: invalid JSON response"  # nosec B101
    assert result.error_code == "protocol"  # nosec B101


@pytest.mark.asyncio
async def test_missing_choices_and_embedded_error():
    rec = json_transport({"choices": []})
    result = await OpenAIProvider(KEY, transport=rec.transport()).generate(_request())
    assert result.error_code == "protocol"  # nosec B101

    rec = json_transport({"error": {"type": "server_error", "message": "overloaded"}})
    result = await OpenAIProvider(KEY, transport=rec.transport()).generate(_request())
    assert result.error == "OpenAI API error: server_error: overloaded"  # nosec B101


@pytest.mark.asyncio
async def test_content_filter_without_text():
    rec = json_transport(_completion(content=None, finish="content_filter"))
    result = await OpenAIProvider(KEY, transport=rec.transport()).generate(_request())
    assert result.error == CONTENT_FILTER_ERROR  # nosec B101
    assert result.error_code == "content_filter"  # nosec B101


@pytest.mark.asyncio
async def test_connect_failure_never_raises():
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    result = await OpenAIProvider(KEY, transport=Recorder(refuse).transport()).generate(_request())
    assert result.error.startswith("OpenAI API error: connection failed")  # nosec B101
    assert result.error_code == "unavailable"  # nosec B101


@pytest.mark.asyncio
async def test_request_for_other_model_is_rejected():
    rec = json_transport(_completion())
    result = await OpenAIProvider(KEY, transport=rec.transport()).generate(_request(model="claude-4"))
    assert result.error_code == "validation"  # nosec B101
    assert rec.requests == []  # nosec B101


STREAM = sse_body(
    {"choices": [{"delta": {"role": "assistant", "content": "Hel"}, "finish_reason": None}]},
    {"choices": [{"delta": {"content": "lo"}, "finish_reason": None}]},
    {"choices": [{"delta": {}, "finish_reason": "stop"}]},
    {"choices": [], "usage": {"prompt_tokens": 4, "completion_tokens": 2, "total_tokens": 6}},
)


@pytest.mark.asyncio
@pytest.mark.parametrize("piece_size", [None, 1, 13])
async def test_stream_deltas_then_terminal(piece_size):
    rec = stream_transport(STREAM, piece_size=piece_size)
    chunks = await _collect(OpenAIProvider(KEY, transport=rec.transport()), _request(stream=True))
    assert [c.content for c in chunks] == ["Hel", "lo", ""]  # nosec B101
    assert [c.done for c in chunks] == [False, False, True]  # nosec B101
    assert chunks[-1].error is None  # nosec B101
    assert chunks[-1].usage == TokenUsage(4, 2, 6)  # nosec B101
    body = rec.last_json
    assert body["stream"] is True and body["stream_options"] == {"include_usage": True}  # nosec B101


@pytest.mark.asyncio
async def test_stream_content_filter_matches_batch_outcome():
    partial = sse_body(
        {"choices": [{"delta": {"content": "par"}, "finish_reason": None}]},
        {"choices": [{"delta": {}, "finish_reason": "content_filter"}]},
    )
    chunks = await _collect(OpenAIProvider(KEY, transport=stream_transport(partial).transport()), _request())
    assert [c.content for c in chunks] == ["par", ""]  # nosec B101
    assert chunks[-1].done and chunks[-1].error is None  # nosec B101

    rec = json_transport(_completion(content="par", finish="content_filter"))
    result = await OpenAIProvider(KEY, transport=rec.transport()).generate(_request())
    assert result.content == "par" and result.error is None  # nosec B101

    blocked = sse_body({"choices": [{"delta": {}, "finish_reason": "content_filter"}]})
    chunks = await _collect(OpenAIProvider(KEY, transport=stream_transport(blocked).transport()), _request())
    assert len(chunks) == 1  # nosec B101
    assert chunks[0].error == CONTENT_FILTER_ERROR and chunks[0].error_code == "content_filter"  # nosec B101


@pytest.mark.asyncio
async def test_stream_http_error_is_single_terminal_chunk():
    rec = json_transport({"error": {"message": "slow down"}}, status=429)
    chunks = await _collect(OpenAIProvider(KEY, transport=rec.transport()), _request())
    assert len(chunks) == 1  # nosec B101
    assert chunks[0].done and chunks[0].error_code == "rate_limit"  # nosec B101
    assert chunks[0].error.startswith("OpenAI API error: 429 Too Many Requests")  # nosec B101
    assert "slow down" in chunks[0].error  # nosec B101


@pytest.mark.asyncio
async def test_stream_eof_without_content_is_error():
    chunks = await _collect(
        OpenAIProvider(KEY, transport=stream_transport(b": ping\n\n").transport()), _request()
    )
    assert len(chunks) == 1 and chunks[0].error == EMPTY_STREAM_ERROR  # nosec B101


@pytest.mark.asyncio
async def test_stream_eof_after_content_ends_normally():
    body = sse_body({"choices": [{"delta": {"content": "abc"}, "finish_reason": None}]}, done=False)
    chunks = await _collect(OpenAIProvider(KEY, transport=stream_transport(body).transport()), _request())
    assert [c.content for c in chunks] == ["abc", ""]  # nosec B101
    assert chunks[-1].error is None  # nosec B101


@pytest.mark.asyncio
async def test_xai_and_deepseek_endpoints_and_wire_models():
    rec = json_transport(_completion())
    result = await XAIProvider(KEY, transport=rec.transport()).generate(_request(model="grok-4"))
    assert result.model == "grok-4" and result.ok  # nosec B101
    assert str(rec.requests[0].url) == "https://api.x.ai/v1/chat/completions"  # nosec B101
    assert rec.last_json["model"] == "grok-beta"  # nosec B101

    rec = json_transport(_completion())
    result = await DeepseekProvider(KEY, transport=rec.transport()).generate(_request(model="deepseek"))
    assert result.model == "deepseek" and result.ok  # nosec B101
    assert str(rec.requests[0].url) == "https://api.deepseek.com/v1/chat/completions"  # nosec B101
    assert rec.last_json["model"] == "deepseek-chat"  # nosec B101


def test_provider_identity_and_streaming_support(monkeypatch):
    assert OpenAIProvider(KEY).provider_name == "openai"  # nosec B101
    assert XAIProvider(KEY).model == "grok-4"  # nosec B101
    assert OpenAIProvider(KEY).supports_streaming() is True  # nosec B101
    assert OpenAIProvider(None).supports_streaming() is False  # nosec B101
    assert OpenAIProvider(KEY, streaming=False).supports_streaming() is False  # nosec B101
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    assert OpenAIProvider(KEY).wire_model == "gpt-4o-mini"  # nosec B101
