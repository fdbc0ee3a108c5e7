"""Pytest configuration for the chorus_providers test suite.

Every test runs with a clean provider environment: API keys, model/base URL
overrides, timeout overrides and the external config file are removed, the
``.env`` loader is pointed at a path that does not exist, and the config
caches are reset before and after the test.
"""

from __future__ import annotations

from typing import Iterator, List

import pytest

from chorus_providers.config import reset_config_cache
from chorus_providers.config.env import ENV_ALIASES, ENV_MAP

from .helpers import ListHandler

_PROVIDERS = ("OPENAI", "ANTHROPIC", "GEMINI", "XAI", "DEEPSEEK")
_SUFFIXES = ("MODEL", "BASE_URL", "STREAMING")


def _isolated_env_names() -> List[str]:
    names = set(ENV_MAP.values())
    for aliases in ENV_ALIASES.values():
        names.update(aliases)
    for prefix in _PROVIDERS:
        names.update(f"{prefix}_{suffix}" for suffix in _SUFFIXES)
    names.update(
        {
            "PROVIDERS_CONFIG_FILE",
            "PROVIDERS_LOG_LEVEL",
            "CHORUS_TIMEOUT_CONNECT_SECONDS",
            "CHORUS_TIMEOUT_READ_SECONDS",
            "CHORUS_DISPATCH_TIMEOUT_SECONDS",
        }
    )
    return sorted(names)


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Strip provider configuration from the environment for one test."""
    for name in _isolated_env_names():
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def log_records() -> Iterator[ListHandler]:
    """Attach a capturing handler to the shared ``providers`` logger."""
    from chorus_providers.base.logging import get_logger

    logger = get_logger("providers")
    handler = ListHandler()
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)

