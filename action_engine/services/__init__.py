"""Application service layer: parsing, registry, dispatch, and responses."""

from __future__ import annotations

from dataclasses import dataclass, field

from .dispatcher import Dispatcher
from .intent_registry import IntentRegistry


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of application-level services available to the API and CLI."""

    registry: IntentRegistry = field(default_factory=IntentRegistry)
    dispatcher: Dispatcher | None = None

    def __post_init__(self) -> None:
        if self.dispatcher is None:
            self.dispatcher = Dispatcher(self.registry)


def build_default_services(
    *,
    registry: IntentRegistry | None = None,
    assistant_name: str = "my assistant",
) -> ServiceContainer:
    """Return a service container whose dispatcher serves ``registry``."""

    registry = registry if registry is not None else IntentRegistry()
    return ServiceContainer(
        registry=registry,
        dispatcher=Dispatcher(registry, assistant_name=assistant_name),
    )


__all__ = ["ServiceContainer", "build_default_services"]
