"""
Providers Base Package

Exports provider-agnostic contracts, DTOs, timeouts, cancellation and the
provider factory for use by the adapters and the aggregation engine.

- Interfaces: normalized provider boundaries
- Models (DTOs): serialization-friendly request/result/chunk objects
- Factory: lazy creation of provider adapters by canonical model id
"""

from .factory import ProviderFactory, UnknownProviderError
from .interfaces import LLMProvider, SupportsStreaming
from .models import (
    ChatRequest,
    ChatResult,
    Message,
    Role,
    StreamChunk,
    TokenUsage,
)
from .timeouts import TimeoutConfig, get_timeout_config
from .cancellation import CancellationToken, CancelledError
from .streaming import (
    StreamMetrics,
    finalize_stream,
    accumulate_chunks,
)

__all__ = [
    # Models
    "Role",
    "Message",
    "ChatRequest",
    "ChatResult",
    "StreamChunk",
    "TokenUsage",
    # Interfaces
    "LLMProvider",
    "SupportsStreaming",
    # Factory
    "ProviderFactory",
    "UnknownProviderError",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "CancellationToken",
    "CancelledError",
    # Streaming
    "StreamMetrics",
    "finalize_stream",
    "accumulate_chunks",
]
