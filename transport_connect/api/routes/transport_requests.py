# transport_connect/api/routes/transport_requests.py
"""
Маршруты заявок на перевозку.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from transport_connect.api.dependencies import Services, get_current_identity, get_services
from transport_connect.api.schemas import ErrorResponse, RequestResponse, StatusUpdateRequest
from transport_connect.core.identity.models import Identity

router = APIRouter(prefix="/requests", tags=["Requests"])


@router.post(
    "",
    response_model=RequestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"model": ErrorResponse, "description": "Только для отправителей"},
        404: {"model": ErrorResponse, "description": "Объявление не найдено"},
    },
)
async def create_request(
    payload: dict[str, Any] = Body(...),
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> RequestResponse:
    """Создание заявки по объявлению."""
    request = await services.engine.create_request(identity, payload)
    return RequestResponse(request=request)


@router.get(
    "/{request_id}",
    response_model=RequestResponse,
    responses={404: {"model": ErrorResponse, "description": "Заявка не найдена"}},
)
async def get_request(
    request_id: str,
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> RequestResponse:
    request = await services.engine.get_request(identity, request_id)
    return RequestResponse(request=request)


@router.put(
    "/{request_id}/status",
    response_model=RequestResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Переход выполняет другая сторона"},
        409: {"model": ErrorResponse, "description": "Недопустимый переход"},
    },
)
async def update_request_status(
    request_id: str,
    body: StatusUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> RequestResponse:
    """Смена статуса заявки."""
    request = await services.engine.transition(request_id, identity, body.status)
    return RequestResponse(request=request)
