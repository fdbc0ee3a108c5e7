"""Shared base for HTTP provider adapters.

Re-exports provide a stable import surface for adapters.
"""

from .base import BaseHTTPProvider
from .helpers import (
    describe_exception,
    embedded_error_message,
    exception_to_error,
    http_status_error,
    protocol_error,
)
from .provider_init import _ProviderInit, provider_init_from_config

__all__ = [
    "BaseHTTPProvider",
    "_ProviderInit",
    "provider_init_from_config",
    "describe_exception",
    "embedded_error_message",
    "exception_to_error",
    "http_status_error",
    "protocol_error",
]
