"""chorus_providers.config.defaults
================================

Central place for small, stable default values used across the
chorus_providers package. These defaults can be overridden via environment
variables or an external configuration file, but provide sensible fallbacks
for local development and tests.

This module intentionally avoids importing from other packages to prevent
circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

from typing import Any, Dict

# ---- Model catalog ----
# Canonical model id -> owning provider family and whether its adapter can
# stream. The ids are opaque labels; the wire model each provider receives is
# configured separately below.
MODEL_CATALOG: Dict[str, Dict[str, Any]] = {
    "gpt-5": {"provider": "openai", "streaming": True},
    "claude-4": {"provider": "anthropic", "streaming": True},
    "gemini-2.5-pro": {"provider": "gemini", "streaming": True},
    "grok-4": {"provider": "xai", "streaming": True},
    "deepseek": {"provider": "deepseek", "streaming": True},
}

SUPPORTED_PROVIDERS = ("openai", "anthropic", "gemini", "xai", "deepseek")

# ---- Provider-specific defaults ----
OPENAI_DEFAULT_MODEL = "gpt-4o"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

ANTHROPIC_DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_API_VERSION = "2023-06-01"

GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

XAI_DEFAULT_MODEL = "grok-beta"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"

DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com/v1"

# ---- Sampling defaults applied when a request leaves a value unset ----
# OpenAI-compatible chat completions (OpenAI, xAI, DeepSeek).
OPENAI_STYLE_DEFAULT_TEMPERATURE = 0.7
OPENAI_STYLE_DEFAULT_MAX_TOKENS = 2000
# Anthropic requires max_tokens; temperature is left to the API.
ANTHROPIC_DEFAULT_MAX_TOKENS = 2000
# Gemini generationConfig.
GEMINI_DEFAULT_TEMPERATURE = 0.2
GEMINI_DEFAULT_MAX_OUTPUT_TOKENS = 512

# ---- CLI defaults ----
CLI_DEFAULT_MODELS = tuple(MODEL_CATALOG.keys())

__all__ = [
    "MODEL_CATALOG",
    "SUPPORTED_PROVIDERS",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "XAI_DEFAULT_MODEL",
    "XAI_DEFAULT_BASE_URL",
    "DEEPSEEK_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_BASE_URL",
    "OPENAI_STYLE_DEFAULT_TEMPERATURE",
    "OPENAI_STYLE_DEFAULT_MAX_TOKENS",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "GEMINI_DEFAULT_TEMPERATURE",
    "GEMINI_DEFAULT_MAX_OUTPUT_TOKENS",
    "CLI_DEFAULT_MODELS",
]
