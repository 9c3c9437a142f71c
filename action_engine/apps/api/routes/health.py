"""Health and readiness routes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from action_engine.services import ServiceContainer

from ..dependencies import get_service_container

router = APIRouter()


@router.get("/")
def read_root() -> dict[str, str]:
    """Info endpoint with a short usage message."""
    return {"message": "POST Conversation API requests to / or /api/v1/action."}


@router.get("/alive")
async def alive_check(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> JSONResponse:
    """Health check reporting how many intents are being served."""
    return JSONResponse({"status": "ok", "intents": len(container.registry)})


__all__ = ["router"]
