"""Shared FastAPI dependencies for service access."""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from action_engine.services import ServiceContainer, runtime
from action_engine.services.dispatcher import Dispatcher


def get_service_container() -> ServiceContainer:
    """Resolve the globally configured service container."""
    try:
        return runtime.get_services()
    except RuntimeError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Service container not configured",
        ) from exc


def get_dispatcher(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> Dispatcher:
    """Return the dispatcher bound to the active container."""
    if container.dispatcher is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Dispatcher is unavailable",
        )
    return container.dispatcher


__all__ = ["get_dispatcher", "get_service_container"]
