"""Provider configuration merge order, env helpers and credential resolution."""
from __future__ import annotations

import json
import os

from chorus_providers.config import get_model, get_provider_config, provider_for_model, reset_config_cache
from chorus_providers.config.credentials import resolve_credentials
from chorus_providers.config.env import (
    ENV_ALIASES,
    get_env_var_candidates,
    get_env_var_name,
    is_placeholder,
    resolve_provider_key,
)


def test_defaults():
    cfg = get_provider_config("anthropic")
    assert cfg["model"] == "claude-3-5-sonnet-20241022"  # nosec B101
    assert cfg["base_url"] == "https://api.anthropic.com/v1"  # nosec B101
    assert cfg["api_version"] == "2023-06-01"  # nosec B101
    assert cfg["streaming"] is True  # nosec B101
    assert "api_key" not in cfg  # nosec B101
    assert get_model("gemini") == "gemini-2.5-flash"  # nosec B101
    assert provider_for_model("grok-4") == "xai" and provider_for_model("nope") is None  # nosec B101


def test_merge_order_file_env_overrides(monkeypatch, tmp_path):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"openai": {"model": "from-file", "base_url": "https://file.example/v1"}}))
    monkeypatch.setenv("PROVIDERS_CONFIG_FILE", str(path))
    reset_config_cache()
    cfg = get_provider_config("openai")
    assert cfg["model"] == "from-file" and cfg["base_url"] == "https://file.example/v1"  # nosec B101

    monkeypatch.setenv("OPENAI_MODEL", "from-env")
    monkeypatch.setenv("OPENAI_STREAMING", "false")
    cfg = get_provider_config("openai")
    assert cfg["model"] == "from-env" and cfg["streaming"] is False  # nosec B101

    cfg = get_provider_config("openai", overrides={"model": "from-code", "base_url": None})
    assert cfg["model"] == "from-code" and cfg["base_url"] == "https://file.example/v1"  # nosec B101


def test_yaml_config_file(monkeypatch, tmp_path):
    path = tmp_path / "providers.yaml"
    path.write_text("gemini:\n  streaming: false\n  model: gemini-pro-x\n")
    monkeypatch.setenv("PROVIDERS_CONFIG_FILE", str(path))
    reset_config_cache()
    cfg = get_provider_config("gemini")
    assert cfg["streaming"] is False and cfg["model"] == "gemini-pro-x"  # nosec B101


def test_dotenv_fills_missing_keys(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text('# comment\nXAI_API_KEY="xai-from-dotenv"\nnot a pair\n')
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    reset_config_cache()
    try:
        assert get_provider_config("xai")["api_key"] == "xai-from-dotenv"  # nosec B101
    finally:
        os.environ.pop("XAI_API_KEY", None)


def test_env_names_and_placeholders(monkeypatch):
    assert get_env_var_name("openai") == "OPENAI_API_KEY"  # nosec B101
    assert ENV_ALIASES["gemini"][0] == "GEMINI_API_KEY"  # nosec B101
    assert list(get_env_var_candidates("gemini"))[1] == "GOOGLE_AI_API_KEY"  # nosec B101
    for value in ("placeholder", "ChangeMe", "example-key", "test_abc", "sk-****abcd", "••••"):
        assert is_placeholder(value), value  # nosec B101
    assert not is_placeholder("sk-real-value") and not is_placeholder(None)  # nosec B101

    monkeypatch.setenv("GEMINI_API_KEY", "your-api-key")
    monkeypatch.setenv("GOOGLE_AI_API_KEY", " g-real ")
    assert resolve_provider_key("gemini") == ("g-real", "GOOGLE_AI_API_KEY")  # nosec B101
    assert resolve_provider_key("deepseek") == (None, None)  # nosec B101


def test_credentials_precedence(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-openai")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-anthropic")
    monkeypatch.setenv("XAI_API_KEY", "env-xai")
    creds = resolve_credentials(
        {"gpt-5": " req-openai ", "claude-4": "sk-****1234"},
        {"claude-4": "stored-anthropic", "grok-4": "  "},
    )
    assert creds["gpt-5"] == "req-openai"  # nosec B101
    assert creds["claude-4"] == "stored-anthropic"  # nosec B101
    assert creds["grok-4"] == "env-xai"  # nosec B101
    assert "deepseek" not in creds and "gemini-2.5-pro" not in creds  # nosec B101


def test_credentials_without_environment_and_model_filter(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-openai")
    assert resolve_credentials(use_environment=False) == {}  # nosec B101
    creds = resolve_credentials({"claude-4": "k"}, models=["gpt-5"])
    assert creds == {"gpt-5": "env-openai"}  # nosec B101
