"""OpenAIProvider adapter.

The Chat Completions wire format lives in ``BaseOpenAIStyleProvider``; this
module binds the openai configuration (wire model ``gpt-4o`` by default,
overridable with ``OPENAI_MODEL``) to the canonical ``gpt-5`` id.

Streaming uses SSE terminated by ``data: [DONE]`` and asks for a trailing
usage chunk via ``stream_options.include_usage``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..base.http_provider_parts import provider_init_from_config
from ..base.openai_style_parts import BaseOpenAIStyleProvider
from ..base.timeouts import TimeoutConfig


class OpenAIProvider(BaseOpenAIStyleProvider):
    """OpenAI adapter bound to one canonical model id and one API key."""

    display_name = "OpenAI"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model_id: str = "gpt-5",
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        streaming: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[TimeoutConfig] = None,
    ) -> None:
        super().__init__(
            provider_init_from_config(
                "openai",
                model_id=model_id,
                api_key=api_key,
                model=model,
                base_url=base_url,
                streaming=streaming,
                transport=transport,
                timeout=timeout,
            )
        )

    @property
    def provider_name(self) -> str:
        return "openai"


__all__ = ["OpenAIProvider"]
