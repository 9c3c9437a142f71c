"""Conversation API fulfillment endpoints."""

from __future__ import annotations

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from action_engine.core.config import settings
from action_engine.core.logging import get_logger
from action_engine.services import ServiceContainer
from action_engine.services.action_package import (
    ACTION_PATH,
    default_endpoint,
    generate_action_package,
)
from action_engine.services.dispatcher import Dispatcher

from ..dependencies import get_dispatcher, get_service_container

router = APIRouter(tags=["actions"])
logger = get_logger(__name__)


async def _read_body(request: Request) -> Any:
    """Decode the JSON body; an empty or invalid body is treated as ``{}``."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("Received non-JSON request body (%d bytes)", len(raw))
        return {}


@router.post("/")
@router.post(ACTION_PATH)
async def run_action(
    request: Request,
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
) -> JSONResponse:
    """Dispatch a Conversation API request and return the protocol response."""
    body = await _read_body(request)
    result = await dispatcher.run_intent(body)
    return JSONResponse(content=result.body, headers=result.headers)


@router.get("/api/v1/action-package")
async def action_package(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> JSONResponse:
    """Return the action package for the registered intents."""
    package = generate_action_package(
        container.registry,
        project_id=settings.PROJECT_ID,
        version_label=settings.VERSION_LABEL,
        invocation_name=settings.INVOCATION_NAME,
        voice_name=settings.VOICE_NAME,
        language_code=settings.LANGUAGE_CODE,
        endpoint=default_endpoint(settings.BASE_URL),
    )
    return JSONResponse(package)


__all__ = ["router"]
