"""Capability routing, adapter registry construction and the provider factory."""
from __future__ import annotations

import pytest

from chorus_providers.aggregation import Capability, CapabilityRouter, build_registry, default_capability_table
from chorus_providers.anthropic import AnthropicProvider
from chorus_providers.base.factory import ProviderFactory, UnknownProviderError
from chorus_providers.gemini import GeminiProvider
from chorus_providers.openai import OpenAIProvider


def test_default_table_covers_catalog():
    table = default_capability_table()
    assert set(table) == {"gpt-5", "claude-4", "gemini-2.5-pro", "grok-4", "deepseek"}  # nosec B101
    assert all(cap is Capability.STREAMING for cap in table.values())  # nosec B101


def test_provider_streaming_flag_makes_model_batch_only(monkeypatch):
    monkeypatch.setenv("GEMINI_STREAMING", "0")
    router = CapabilityRouter()
    assert router.capability("gemini-2.5-pro") is Capability.BATCH_ONLY  # nosec B101
    streaming, batch_only = router.partition(["gpt-5", "gemini-2.5-pro", "claude-4"])
    assert streaming == ["gpt-5", "claude-4"] and batch_only == ["gemini-2.5-pro"]  # nosec B101
    assert router.as_dict()["gemini-2.5-pro"] == "batch_only"  # nosec B101


def test_unknown_model_defaults_to_streaming():
    assert CapabilityRouter({}).is_streaming("nope")  # nosec B101


def test_factory_creates_bound_adapters():
    adapter = ProviderFactory.create("claude-4", api_key="k-1")
    assert isinstance(adapter, AnthropicProvider) and adapter.model == "claude-4"  # nosec B101
    assert ProviderFactory.supported() == ("gpt-5", "claude-4", "gemini-2.5-pro", "grok-4", "deepseek")  # nosec B101
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("gpt-2")
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("gpt-5", bogus=True)


def test_build_registry_skips_blank_and_unknown(log_records):
    registry = build_registry({"gpt-5": " sk-1 ", "gemini-2.5-pro": "g", "claude-4": "", "llama": "x"})
    assert set(registry) == {"gpt-5", "gemini-2.5-pro"}  # nosec B101
    assert isinstance(registry["gpt-5"], OpenAIProvider)  # nosec B101
    assert isinstance(registry["gemini-2.5-pro"], GeminiProvider)  # nosec B101
    assert registry["gpt-5"].supports_streaming()  # nosec B101
    assert log_records.events("registry.skip")[0]["model"] == "llama"  # nosec B101
