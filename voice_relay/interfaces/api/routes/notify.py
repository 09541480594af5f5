"""Endpoints that accept notification requests."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from voice_relay.application.use_cases.notifications import (
    InputValidationError,
    NotificationDispatcher,
)
from voice_relay.domain.entities import NotificationRequest
from voice_relay.interfaces.api.dependencies import enforce_rate_limit, get_dispatcher
from voice_relay.interfaces.api.schemas import NotifyRequest, StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"], dependencies=[Depends(enforce_rate_limit)])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=StatusResponse(status="error", message=message).model_dump(),
    )


def _describe_schema_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"Invalid {location}: {first.get('msg', 'invalid value')}"


async def _read_payload(request: Request) -> NotifyRequest:
    raw = await request.body()
    if not raw.strip():
        return NotifyRequest()
    try:
        body: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InputValidationError("body", "Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise InputValidationError("body", "Invalid body: expected a JSON object")
    try:
        return NotifyRequest.model_validate(body)
    except ValidationError as exc:
        raise InputValidationError("body", _describe_schema_error(exc)) from exc


async def _handle(
    request: Request,
    dispatcher: NotificationDispatcher,
    build: Callable[[NotifyRequest], NotificationRequest],
) -> JSONResponse:
    try:
        payload = await _read_payload(request)
        await dispatcher.dispatch(build(payload))
    except InputValidationError as exc:
        logger.info("Rejected notification: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except Exception:
        logger.exception("Unexpected error while dispatching notification")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return JSONResponse(
        content=StatusResponse(status="success", message="Notification sent").model_dump()
    )


@router.post("/notify", response_model=StatusResponse)
async def notify(
    request: Request,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    """Relay a notification, voiced unless ``voice_enabled`` is false."""

    return await _handle(request, dispatcher, lambda payload: payload.to_notification())


@router.post("/pai", response_model=StatusResponse)
async def notify_assistant(
    request: Request,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    """Relay an assistant notification, always voiced with the default voice."""

    return await _handle(
        request, dispatcher, lambda payload: payload.to_assistant_notification()
    )
