"""Pydantic DTOs validating inbound payloads."""

from .chat import DispatchRequestDTO, MessageDTO

__all__ = ["DispatchRequestDTO", "MessageDTO"]
