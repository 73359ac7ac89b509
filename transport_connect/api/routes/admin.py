# transport_connect/api/routes/admin.py
"""
Маршруты администратора.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from transport_connect.api.dependencies import Services, get_current_identity, get_services
from transport_connect.api.schemas import (
    ActiveStatusRequest,
    DashboardResponse,
    ErrorResponse,
    OfferListResponse,
    SuccessResponse,
    UserResponse,
)
from transport_connect.core.identity.models import Identity

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={403: {"model": ErrorResponse, "description": "Только для администраторов"}},
)


@router.get("/offers", response_model=OfferListResponse)
async def list_offers(
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> OfferListResponse:
    offers = await services.admin.list_offers(identity)
    return OfferListResponse(count=len(offers), offers=offers)


@router.delete("/offers/{offer_id}", response_model=SuccessResponse)
async def delete_offer(
    offer_id: str,
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> SuccessResponse:
    await services.admin.delete_offer(identity, offer_id)
    return SuccessResponse()


@router.put("/users/{user_id}/status", response_model=UserResponse)
async def set_user_status(
    user_id: int,
    body: ActiveStatusRequest,
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> UserResponse:
    """Активация или деактивация пользователя."""
    user = await services.admin.set_active(identity, user_id, body.is_active)
    return UserResponse(user=user.summary())


@router.put("/users/{user_id}/verify", response_model=UserResponse)
async def verify_user(
    user_id: int,
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> UserResponse:
    user = await services.admin.verify(identity, user_id)
    return UserResponse(user=user.summary())


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> DashboardResponse:
    """Сводная статистика."""
    return DashboardResponse(stats=await services.admin.get_statistics(identity))
