"""Graceful parsing of inbound Conversation API payloads.

Nothing in this module raises on malformed input. Each inbound field carries
its own defaulting rule (see the ``Annotated`` aliases below), so a missing or
wrongly typed value is replaced by an empty default rather than rejected.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from action_engine.core.logging import get_logger
from action_engine.core.models import (
    ConversationType,
    Input,
    NormalizedRequest,
    QueryMap,
    QueryValue,
)

logger = get_logger(__name__)

TRIGGER_QUERY = "trigger_query"

# The platform splits apostrophes out as standalone tokens ("O ' Brien").
APOSTROPHE_ARTIFACT = " ' "


def parse_object(value: Any) -> dict[str, Any]:
    """Return ``value`` as a dict when it is a mapping, else an empty dict."""
    if isinstance(value, dict):
        return value
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def parse_array(value: Any) -> list[Any]:
    """Return ``value`` as a list when it is a sequence container, else an empty list."""
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return []


def clean_text(value: Any) -> str:
    """Strip upstream artifact sequences from a text field."""
    if not isinstance(value, str):
        return ""
    return value.replace(APOSTROPHE_ARTIFACT, "'")


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


ObjectField = Annotated[dict, BeforeValidator(parse_object)]
ArrayField = Annotated[list, BeforeValidator(parse_array)]
ObjectArrayField = Annotated[list[ObjectField], BeforeValidator(parse_array)]
TextField = Annotated[str, BeforeValidator(clean_text)]
NameField = Annotated[Optional[str], BeforeValidator(_optional_str)]


class InboundArgument(BaseModel):
    """One entry of ``inputs[].arguments``."""

    model_config = ConfigDict(extra="ignore")

    name: NameField = None
    raw_text: TextField = ""
    text_value: TextField = ""
    location_value: Any = None


class InboundInput(BaseModel):
    """One entry of ``inputs``."""

    model_config = ConfigDict(extra="ignore")

    intent: NameField = None
    raw_inputs: ObjectArrayField = Field(default_factory=list)
    arguments: ObjectArrayField = Field(default_factory=list)


class InboundRequest(BaseModel):
    """Top-level Conversation API request body."""

    model_config = ConfigDict(extra="ignore")

    user: ObjectField = Field(default_factory=dict)
    device: ObjectField = Field(default_factory=dict)
    conversation: ObjectField = Field(default_factory=dict)
    inputs: ArrayField = Field(default_factory=list)


def parse_user(user: Any) -> dict[str, Any]:
    return parse_object(user)


def parse_device(device: Any) -> dict[str, Any]:
    return parse_object(device)


def parse_conversation(conversation: Any) -> dict[str, Any]:
    """Copy the conversation mapping and add a string ``type`` from its enum code."""
    parsed = dict(parse_object(conversation))
    parsed["type"] = ConversationType.from_code(parsed.get("conversation_type")).value
    return parsed


def parse_assistant_query(args: Any) -> QueryMap:
    """Build the query map for a list of argument objects.

    ``value`` prefers ``text_value`` and falls back to ``raw_text``. A
    ``trigger_query`` entry is always present.
    """
    query: QueryMap = {}
    for raw_arg in parse_array(args):
        try:
            arg = InboundArgument.model_validate(parse_object(raw_arg))
        except ValidationError:  # pragma: no cover - validators coerce every field
            logger.warning("Dropping unparseable argument", exc_info=True)
            continue
        if arg.name is None:
            continue
        query[arg.name] = QueryValue(
            value=arg.text_value or arg.raw_text,
            raw_text=arg.raw_text,
            location=arg.location_value,
        )
    query.setdefault(TRIGGER_QUERY, QueryValue(value="", raw_text=""))
    return query


def parse_input(value: Any, default_intent_name: str) -> Input:
    """Normalize a single input and attach its derived query map."""
    try:
        inbound = InboundInput.model_validate(parse_object(value))
    except ValidationError:  # pragma: no cover - validators coerce every field
        logger.warning("Replacing unparseable input with defaults", exc_info=True)
        inbound = InboundInput()
    return Input(
        intent=inbound.intent or default_intent_name,
        raw_inputs=inbound.raw_inputs,
        arguments=inbound.arguments,
        query=parse_assistant_query(inbound.arguments),
    )


def parse_inputs(inputs: Any, default_intent_name: str) -> list[Input]:
    return [parse_input(item, default_intent_name) for item in parse_array(inputs)]


def parse_request(body: Any, default_intent_name: str) -> NormalizedRequest:
    """Normalize an entire request body."""
    try:
        inbound = InboundRequest.model_validate(parse_object(body))
    except ValidationError:  # pragma: no cover - validators coerce every field
        logger.warning("Replacing unparseable request with defaults", exc_info=True)
        inbound = InboundRequest()
    return NormalizedRequest(
        user=parse_user(inbound.user),
        device=parse_device(inbound.device),
        conversation=parse_conversation(inbound.conversation),
        inputs=parse_inputs(inbound.inputs, default_intent_name),
    )


__all__ = [
    "APOSTROPHE_ARTIFACT",
    "TRIGGER_QUERY",
    "InboundArgument",
    "InboundInput",
    "InboundRequest",
    "clean_text",
    "parse_array",
    "parse_assistant_query",
    "parse_conversation",
    "parse_device",
    "parse_input",
    "parse_inputs",
    "parse_object",
    "parse_request",
    "parse_user",
]
