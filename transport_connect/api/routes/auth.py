# transport_connect/api/routes/auth.py
"""
Маршруты аутентификации.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from transport_connect.api.dependencies import Services, get_current_identity, get_services, get_token
from transport_connect.api.schemas import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    SuccessResponse,
    UserResponse,
)
from transport_connect.core.identity.models import Identity

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Некорректные данные"},
        409: {"model": ErrorResponse, "description": "Email уже зарегистрирован"},
    },
)
async def register(
    body: RegisterRequest,
    services: Services = Depends(get_services),
) -> AuthResponse:
    """Регистрация водителя или отправителя."""
    result = await services.authenticator.register(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password=body.password,
        role=body.role,
        phone=body.phone,
    )
    return AuthResponse(token=result.token, user=result.identity.summary())


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Неверный email или пароль"},
        403: {"model": ErrorResponse, "description": "Учётная запись деактивирована"},
    },
)
async def login(
    body: LoginRequest,
    services: Services = Depends(get_services),
) -> AuthResponse:
    """Вход по email и паролю."""
    result = await services.authenticator.login(body.email, body.password)
    return AuthResponse(token=result.token, user=result.identity.summary())


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    token: str = Depends(get_token),
    services: Services = Depends(get_services),
) -> SuccessResponse:
    """Отзыв текущего токена."""
    await services.authenticator.logout(token)
    return SuccessResponse()


@router.get("/me", response_model=UserResponse)
async def me(
    identity: Identity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> UserResponse:
    """Профиль текущего пользователя."""
    return UserResponse(user=await services.authenticator.me(identity))
