"""chorus_providers package

Multi-provider response aggregation: send one conversation to several LLM
providers at once and collect their answers side by side, either as complete
results or as one merged stream of incremental chunks.

Public API (re-exported):
    - Version: ``__version__``
    - Engine: :class:`AggregationEngine`, :class:`CapabilityRouter`
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`
    - Factory: :class:`ProviderFactory`, :func:`create`
    - Data model: ``Message``, ``ChatRequest``, ``ChatResult``,
      ``StreamChunk``, ``TokenUsage``
    - Credentials: :func:`resolve_credentials`
"""

from .aggregation import AggregationEngine, Capability, CapabilityRouter
from .base.cancellation import CancellationToken
from .base.errors import ErrorCode, ProviderError
from .base.factory import ProviderFactory, UnknownProviderError
from .base.models import ChatRequest, ChatResult, Message, StreamChunk, TokenUsage
from .config.credentials import resolve_credentials

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AggregationEngine",
    "Capability",
    "CapabilityRouter",
    "CancellationToken",
    "ErrorCode",
    "ProviderError",
    "ProviderFactory",
    "UnknownProviderError",
    "ChatRequest",
    "ChatResult",
    "Message",
    "StreamChunk",
    "TokenUsage",
    "resolve_credentials",
    "create",
]


def create(model_id: str, **kwargs):
    """Instantiate the adapter bound to ``model_id`` via ``ProviderFactory``.

    Raises
    ------
    ProviderError
        When ``model_id`` is unknown or the adapter constructor fails.
    """
    try:
        return ProviderFactory.create(model_id, **kwargs)
    except UnknownProviderError as e:
        raise ProviderError(
            code=ErrorCode.UNSUPPORTED, message=str(e), provider="unknown", model=model_id
        ) from e
    except Exception as e:
        raise ProviderError(
            code=ErrorCode.UNKNOWN,
            message=f"Failed to create provider for '{model_id}': {e}",
            provider="unknown",
            model=model_id,
        ) from e
