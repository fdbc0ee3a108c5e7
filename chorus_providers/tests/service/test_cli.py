"""chorus-cli parser and subcommand handlers."""
from __future__ import annotations

import io
import json

import pytest

from chorus_providers.config.defaults import CLI_DEFAULT_MODELS
from chorus_providers.service.cli import main
from chorus_providers.service.cli.cli_actions import build_payload, handle_run, plan_dispatch
from chorus_providers.service.cli.cli_parser import build_parser

from ..aggregation.fake_providers import FakeProviders


def _run_args(*argv):
    return build_parser().parse_args(["run", *argv])


def test_parser_defaults():
    args = _run_args("hello")
    assert args.models == list(CLI_DEFAULT_MODELS)  # nosec B101
    assert args.stream is False and args.timeout is None and args.max_tokens is None  # nosec B101
    args = _run_args("hello", "--stream", "--models", "gpt-5", "claude-4")
    assert args.stream is True and args.models == ["gpt-5", "claude-4"]  # nosec B101
    assert _run_args("hello", "--stream", "false").stream is False  # nosec B101


def test_parser_rejects_non_positive_timeout():
    with pytest.raises(SystemExit):
        _run_args("hello", "--timeout", "0")


def test_build_payload():
    args = _run_args("hello", "--system", "be brief", "--max-tokens", "50", "--temperature", "0")
    payload = build_payload(args)
    assert payload["messages"] == [  # nosec B101
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "hello"},
    ]
    assert payload["max_output_tokens"] == 50 and payload["temperature"] == 0.0  # nosec B101


def test_plan_dispatch_reports_credentials(monkeypatch):
    monkeypatch.setenv("GOOGLE_AI_API_KEY", "g-key")
    plan = plan_dispatch(["gemini-2.5-pro", "gpt-5", "llama"])
    rows = {row["model"]: row for row in plan["models"]}
    assert rows["gemini-2.5-pro"]["api_key_present"] is True  # nosec B101
    assert rows["gemini-2.5-pro"]["set_one_of_env"][0] == "GEMINI_API_KEY"  # nosec B101
    assert rows["gpt-5"]["api_key_present"] is False and rows["gpt-5"]["adapter_available"] is True  # nosec B101
    assert rows["llama"]["provider"] is None and rows["llama"]["adapter_available"] is False  # nosec B101


def test_main_plan_and_models(capsys):
    assert main(["plan", "--models", "gpt-5"]) == 0  # nosec B101
    plan = json.loads(capsys.readouterr().out)
    assert plan["models"][0]["model"] == "gpt-5"  # nosec B101

    assert main(["models"]) == 0  # nosec B101
    rows = json.loads(capsys.readouterr().out)
    assert [r["model"] for r in rows] == list(CLI_DEFAULT_MODELS)  # nosec B101
    assert {r["capability"] for r in rows} <= {"streaming", "batch_only"}  # nosec B101


def test_main_without_command_prints_help(capsys):
    assert main([]) == 2  # nosec B101
    assert "chorus-cli" in capsys.readouterr().out  # nosec B101


def test_handle_run_batch(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
    fake = FakeProviders()
    out = io.StringIO()
    code = handle_run(_run_args("hello", "--models", "gpt-5", "grok-4"), out=out, transport=fake.transport())
    assert code == 0  # nosec B101
    results = json.loads(out.getvalue())
    assert results[0]["content"] == "Hello from GPT"  # nosec B101
    assert results[1]["error_code"] == "not_configured"  # nosec B101


def test_handle_run_stream_all_failed(monkeypatch, log_records):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-deepseek")
    fake = FakeProviders(fail={"api.deepseek.com": 401})
    out = io.StringIO()
    code = handle_run(
        _run_args("hello", "--models", "deepseek", "grok-4", "--stream"), out=out, transport=fake.transport()
    )
    assert code == 1  # nosec B101
    events = [json.loads(line) for line in out.getvalue().splitlines()]
    assert events[-1] == {"type": "end"}  # nosec B101
    assert {e["model"] for e in events if e.get("done")} == {"deepseek", "grok-4"}  # nosec B101
    (final,) = log_records.events("cli.finalize")
    assert final["emitted"] is False  # nosec B101


def test_handle_run_invalid_input(capsys):
    out = io.StringIO()
    assert handle_run(_run_args("   "), out=out) == 2  # nosec B101
    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "invalid request"  # nosec B101
    assert out.getvalue() == ""  # nosec B101
