"""Application bootstrap helpers for assembling the service container."""

from __future__ import annotations

from action_engine.core.config import Settings, settings as default_settings
from action_engine.core.logging import get_logger
from action_engine.services import ServiceContainer, build_default_services
from action_engine.services.intent_loader import load_intents
from action_engine.services.intent_registry import IntentRegistry

logger = get_logger(__name__)


def build_registry(settings: Settings | None = None) -> IntentRegistry:
    """Create a registry from settings, loading ``INTENTS_DIR`` when configured."""

    settings = settings or default_settings
    registry = IntentRegistry(prefix=settings.INTENT_PREFIX, main_intent=settings.MAIN_INTENT)
    if settings.INTENTS_DIR is not None:
        load_intents(registry, settings.INTENTS_DIR)
    return registry


def build_default_service_container(
    settings: Settings | None = None,
    registry: IntentRegistry | None = None,
) -> ServiceContainer:
    """Return the default service container with a frozen intent registry."""

    settings = settings or default_settings
    registry = registry if registry is not None else build_registry(settings)
    registry.freeze()
    logger.info("Serving %d intents", len(registry))
    return build_default_services(registry=registry, assistant_name=settings.ASSISTANT_NAME)


__all__ = ["build_default_service_container", "build_registry"]
