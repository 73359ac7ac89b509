# transport_connect/api/routes/offers.py
"""
Маршруты объявлений водителей.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from transport_connect.api.dependencies import Services, get_current_identity, get_services
from transport_connect.api.schemas import ErrorResponse, OfferResponse
from transport_connect.core.identity.models import Identity

router = APIRouter(prefix="/offers", tags=["Offers"])


@router.post(
    "",
    response_model=OfferResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse, "description": "Только для водителей"}},
)
async def create_offer(
    payload: dict[str, Any] = Body(...),
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> OfferResponse:
    """Создание объявления о рейсе."""
    offer = await services.offers.create_offer(identity, payload)
    return OfferResponse(offer=offer)
