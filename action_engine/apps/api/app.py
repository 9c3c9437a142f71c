"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from action_engine.apps.api.middleware import CorrelationIdMiddleware
from action_engine.core.logging import get_logger
from action_engine.services import ServiceContainer, runtime

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Freeze the intent registry before serving and log shutdown."""
    services = getattr(app.state, "services", None)
    if isinstance(services, ServiceContainer):
        runtime.set_services(services)
        services.registry.freeze()
        logger.info("Serving %d intents", len(services.registry))
    try:
        yield
    finally:
        logger.info("action engine shutting down")


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """Build the FastAPI application with configured routers."""
    if services is None:
        raise RuntimeError("Service container must be provided when creating the app.")
    app = FastAPI(lifespan=lifespan)
    app.state.services = services
    runtime.set_services(services)
    app.add_middleware(CorrelationIdMiddleware)

    from .routes import actions, health  # pylint: disable=import-outside-toplevel

    app.include_router(health.router)
    app.include_router(actions.router)
    return app


__all__ = ["create_app", "lifespan"]
