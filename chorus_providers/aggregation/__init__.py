"""Multi-model aggregation: capability routing, registry, supervisor and engine."""

from .capabilities import Capability, CapabilityRouter, default_capability_table
from .engine import AggregationEngine, not_configured_error
from .registry import build_registry
from .supervisor import DispatchState, DispatchSupervisor, TerminationReason

__all__ = [
    "AggregationEngine",
    "Capability",
    "CapabilityRouter",
    "DispatchState",
    "DispatchSupervisor",
    "TerminationReason",
    "build_registry",
    "default_capability_table",
    "not_configured_error",
]
