"""Message helpers shared across providers and the aggregation engine.

Helpers here are side-effect free and operate on provider-agnostic DTOs only.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..models import Message, VALID_ROLES

SYSTEM_JOINER = "\n\n"


def coerce_messages(messages: Iterable[Any]) -> List[Message]:
    """Validate and normalize an ordered message list.

    Accepts ``Message`` instances or ``{"role", "content"}`` mappings. Several
    system turns are merged into one leading system turn (``merge_system``).

    Raises
    ------
    ValueError
        When the list is empty, an item has an unsupported shape or role, or
        a content value is not text.
    """
    out: List[Message] = []
    for idx, item in enumerate(messages or []):
        if isinstance(item, Message):
            msg = item
        elif isinstance(item, Mapping):
            if "role" not in item:
                raise ValueError(f"message {idx} has no role")
            content = item.get("content", "")
            if content is not None and not isinstance(content, str):
                raise ValueError(f"message {idx} content must be a string")
            msg = Message(role=item["role"], content=content or "")
        else:
            raise ValueError(f"message {idx} must be a Message or mapping, got {type(item).__name__}")
        if msg.role not in VALID_ROLES:
            raise ValueError(f"message {idx} has unsupported role {msg.role!r}")
        out.append(msg)
    if not out:
        raise ValueError("messages must be a non-empty list")
    return merge_system(out)


def split_system(messages: List[Message]) -> Tuple[Optional[str], List[Message]]:
    """Return ``(system_text, non_system_messages)``.

    Every system turn contributes to ``system_text`` (joined with a blank
    line); ``None`` when the conversation has no system turn.
    """
    parts: List[str] = []
    has_system = False
    rest: List[Message] = []
    for m in messages:
        if m.role == "system":
            has_system = True
            if m.content:
                parts.append(m.content)
            continue
        rest.append(m)
    return (SYSTEM_JOINER.join(parts) if has_system else None), rest


def merge_system(messages: List[Message]) -> List[Message]:
    """Return ``messages`` with at most one system turn, placed first.

    A request carries one logical system instruction; several system turns
    are joined so inline and out-of-band providers receive the same text.
    """
    system, rest = split_system(messages)
    if system is None:
        return list(messages)
    return [Message(role="system", content=system), *rest]


__all__ = ["SYSTEM_JOINER", "coerce_messages", "split_system", "merge_system"]
