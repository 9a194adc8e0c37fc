"""Field access over loosely-typed node and edge records.

Engine callers may hand over pydantic models, dataclasses or plain dicts
(`{"id": ..., "type": ...}`); everything reads through `read_field`.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any


def read_field(record: Any, name: str, default: Any = None) -> Any:
    """Read `name` from a mapping key or an attribute, whichever exists."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def tag_value(tag: Any) -> Any:
    """Plain value of an enum tag; other values pass through unchanged."""
    if isinstance(tag, Enum):
        return tag.value
    return tag
