"""Registry mapping canonical intent names to their metadata and handlers."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from action_engine.core.exceptions import (
    IntentLookupError,
    IntentNotFoundError,
    InvalidIntentPrefixError,
    RegistryFrozenError,
)
from action_engine.core.intents import Intent, IntentHandler, IntentMetadata
from action_engine.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_INTENT_PREFIX = "assistant.intent.action"
DEFAULT_MAIN_INTENT = "MAIN"


@dataclass(slots=True)
class IntentLookup:
    """Outcome of :meth:`IntentRegistry.find_intent`; exactly one field is set."""

    intent: Optional[Intent] = None
    error: Optional[IntentLookupError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.intent is not None


class IntentRegistry:
    """Intents keyed by full name, populated at setup and frozen before serving."""

    def __init__(
        self,
        prefix: str = DEFAULT_INTENT_PREFIX,
        main_intent: str = DEFAULT_MAIN_INTENT,
    ) -> None:
        self._prefix = prefix.rstrip(".") + "."
        self._main_intent = main_intent
        self._intents: dict[str, Intent] = {}
        self._frozen = False

    @property
    def prefix(self) -> str:
        """Intent name prefix including the trailing dot."""
        return self._prefix

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "IntentRegistry":
        """Forbid further registrations; lookups stay available."""
        self._frozen = True
        return self

    def format_intent_name(self, short_name: Optional[str] = None) -> str:
        """Expand a short name (``"main"``) into its case-insensitive full name."""
        return self._prefix + (short_name or self._main_intent).upper()

    def default_intent_name(self) -> str:
        return self.format_intent_name()

    def add_intent(
        self,
        short_name: Optional[str],
        metadata: Union[IntentMetadata, Mapping[str, Any]],
        handler: IntentHandler,
    ) -> "IntentRegistry":
        """Register ``handler`` under ``short_name``; an existing entry is replaced."""
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register intent {short_name!r}: registry is frozen"
            )
        name = self.format_intent_name(short_name)
        if name in self._intents:
            logger.info("Replacing registered intent %s", name)
        self._intents[name] = Intent(full_name=name, metadata=metadata, handler=handler)
        return self

    def find_intent(self, intent_name: str) -> IntentLookup:
        """Resolve a full intent name without raising."""
        if not isinstance(intent_name, str) or not intent_name.startswith(self._prefix):
            return IntentLookup(
                error=InvalidIntentPrefixError(
                    f'Invalid intent "{intent_name}", must start with "{self._prefix}"'
                )
            )
        intent = self._intents.get(intent_name)
        if intent is None:
            return IntentLookup(error=IntentNotFoundError(f"Intent not found: {intent_name}"))
        return IntentLookup(intent=intent)

    def intents(self) -> Mapping[str, Intent]:
        """Return a read-only view of the registered intents."""
        return MappingProxyType(self._intents)

    def __contains__(self, intent_name: object) -> bool:
        return intent_name in self._intents

    def __len__(self) -> int:
        return len(self._intents)


__all__ = [
    "DEFAULT_INTENT_PREFIX",
    "DEFAULT_MAIN_INTENT",
    "IntentLookup",
    "IntentRegistry",
]
