"""Core data transfer objects shared across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ConversationType(str, Enum):
    """Conversation states reported by the platform, indexed by their wire code."""

    UNSPECIFIED = "UNSPECIFIED"
    NEW = "NEW"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    ARCHIVED = "ARCHIVED"

    @classmethod
    def from_code(cls, code: Any) -> "ConversationType":
        """Map a numeric ``conversation_type`` code onto the enum table."""
        members = list(cls)
        if isinstance(code, float) and code.is_integer():
            code = int(code)
        # bool is an int subclass; a JSON true is not a valid code.
        if isinstance(code, bool) or not isinstance(code, int):
            return cls.UNSPECIFIED
        if 0 <= code < len(members):
            return members[code]
        return cls.UNSPECIFIED


@dataclass(slots=True)
class QueryValue:
    """A single normalized argument from an inbound input."""

    value: str = ""
    raw_text: str = ""
    location: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "raw_text": self.raw_text, "location": self.location}


QueryMap = dict[str, QueryValue]


@dataclass(slots=True)
class Input:
    """One normalized conversational input with its derived query map."""

    intent: str
    raw_inputs: list[dict[str, Any]] = field(default_factory=list)
    arguments: list[dict[str, Any]] = field(default_factory=list)
    query: QueryMap = field(default_factory=dict)


@dataclass(slots=True)
class NormalizedRequest:
    """Canonical view of an inbound platform payload."""

    user: dict[str, Any] = field(default_factory=dict)
    device: dict[str, Any] = field(default_factory=dict)
    conversation: dict[str, Any] = field(default_factory=dict)
    inputs: list[Input] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PlainText:
    """Literal text to be spoken."""

    text: str


@dataclass(frozen=True, slots=True)
class Ssml:
    """Speech synthesis markup to be spoken."""

    ssml: str


SpeechMessage = Union[PlainText, Ssml]


@dataclass(slots=True)
class ActionResult:
    """Protocol body plus the static headers sent with every response."""

    body: dict[str, Any]
    headers: dict[str, str]


__all__ = [
    "ConversationType",
    "QueryValue",
    "QueryMap",
    "Input",
    "NormalizedRequest",
    "PlainText",
    "Ssml",
    "SpeechMessage",
    "ActionResult",
]
