"""Static capability classification for canonical model ids.

Each model id is tagged streaming-capable or batch-only at configuration
time. The classification is a pure lookup, never a runtime check: the
engine consults it once per dispatch to partition the requested models
before any generator or call is created.

The default table is built from ``config.defaults.MODEL_CATALOG`` combined
with each provider's ``streaming`` setting (``<PROVIDER>_STREAMING=0`` or
``streaming: false`` in the config file turns a provider batch-only).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..config import get_provider_config
from ..config.defaults import MODEL_CATALOG


class Capability(str, Enum):
    STREAMING = "streaming"
    BATCH_ONLY = "batch_only"


def default_capability_table() -> Dict[str, Capability]:
    """Build the model -> capability table from the catalog and provider config."""
    table: Dict[str, Capability] = {}
    for model_id, entry in MODEL_CATALOG.items():
        streaming = bool(entry.get("streaming", True))
        if streaming:
            streaming = bool(get_provider_config(entry["provider"]).get("streaming", True))
        table[model_id] = Capability.STREAMING if streaming else Capability.BATCH_ONLY
    return table


class CapabilityRouter:
    """Partition requested models by streaming capability.

    Unknown ids are reported as streaming-capable; they are never backed by an
    adapter and are resolved earlier as not configured.
    """

    def __init__(self, table: Optional[Mapping[str, Capability]] = None) -> None:
        self._table: Dict[str, Capability] = dict(table if table is not None else default_capability_table())

    def capability(self, model_id: str) -> Capability:
        return self._table.get(model_id, Capability.STREAMING)

    def is_streaming(self, model_id: str) -> bool:
        return self.capability(model_id) is Capability.STREAMING

    def partition(self, models: Iterable[str]) -> Tuple[List[str], List[str]]:
        """Return ``(streaming, batch_only)`` preserving input order."""
        streaming: List[str] = []
        batch_only: List[str] = []
        for model_id in models:
            (streaming if self.is_streaming(model_id) else batch_only).append(model_id)
        return streaming, batch_only

    def as_dict(self) -> Dict[str, str]:
        return {k: v.value for k, v in self._table.items()}


__all__ = ["Capability", "CapabilityRouter", "default_capability_table"]
