"""Intent types and models for the action engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from action_engine.services.dispatcher import IntentReply


IntentHandler = Callable[
    [dict[str, Any], dict[str, Any], dict[str, Any], dict[str, Any], "IntentReply"],
    Optional[Awaitable[None]],
]


class IntentMetadata(BaseModel):
    """Deployment metadata for one intent, as read from ``action.json``."""

    model_config = ConfigDict(extra="allow")

    description: str
    queries: list[str]


@dataclass(slots=True)
class Intent:
    """A registered intent: its canonical name, metadata, and handler."""

    full_name: str
    metadata: Union[IntentMetadata, Mapping[str, Any]]
    handler: IntentHandler

    @property
    def description(self) -> Optional[str]:
        return _metadata_field(self.metadata, "description")

    @property
    def queries(self) -> Optional[list[str]]:
        return _metadata_field(self.metadata, "queries")


def _metadata_field(metadata: Any, key: str) -> Any:
    if isinstance(metadata, BaseModel):
        return getattr(metadata, key, None)
    if isinstance(metadata, Mapping):
        return metadata.get(key)
    return None


__all__ = ["Intent", "IntentHandler", "IntentMetadata"]
