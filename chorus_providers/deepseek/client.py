"""DeepseekProvider adapter (OpenAI-compatible; default wire model ``deepseek-chat``)."""

from __future__ import annotations

from typing import Optional

import httpx

from ..base.http_provider_parts import provider_init_from_config
from ..base.openai_style_parts import BaseOpenAIStyleProvider
from ..base.timeouts import TimeoutConfig


class DeepseekProvider(BaseOpenAIStyleProvider):
    display_name = "DeepSeek"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model_id: str = "deepseek",
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        streaming: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[TimeoutConfig] = None,
    ) -> None:
        super().__init__(
            provider_init_from_config(
                "deepseek",
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
        return "deepseek"


__all__ = ["DeepseekProvider"]
