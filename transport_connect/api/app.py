# transport_connect/api/app.py
"""
FastAPI приложение TransportConnect.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from transport_connect.api.dependencies import Services, close_dependencies, init_dependencies
from transport_connect.api.routes import admin_router, auth_router, offers_router, requests_router
from transport_connect.api.schemas import HealthStatus
from transport_connect.common.constants import TypeMsg
from transport_connect.common.exceptions import (
    AccountInactive,
    CoreError,
    DuplicateIdentity,
    Forbidden,
    IdentityNotFound,
    InternalFailure,
    InvalidCredentials,
    InvalidToken,
    InvalidTransition,
    NotFound,
    ValidationError,
    validation_error_from_pydantic,
)
from transport_connect.common.logger import log_error, log_info, setup_logging
from transport_connect.config import settings


# Ошибка ядра -> HTTP статус
STATUS_BY_ERROR: dict[type[CoreError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateIdentity: status.HTTP_409_CONFLICT,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    AccountInactive: status.HTTP_403_FORBIDDEN,
    InvalidToken: status.HTTP_401_UNAUTHORIZED,
    IdentityNotFound: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidTransition: status.HTTP_409_CONFLICT,
    InternalFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(error: CoreError) -> int:
    for error_type in type(error).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# =============================================================================
# ОБРАБОТЧИКИ ОШИБОК
# =============================================================================

async def core_error_handler(request: Request, exc: CoreError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        await log_error(f"{request.method} {request.url.path}: {exc.kind}")
    return JSONResponse(status_code=code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = validation_error_from_pydantic(exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    await log_error(f"Необработанная ошибка {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=InternalFailure().to_dict(),
    )


# =============================================================================
# ПРИЛОЖЕНИЕ
# =============================================================================

def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Создаёт приложение.

    Args:
        services: Готовые сервисы. Если не заданы, инфраструктура
            подключается при старте согласно настройкам.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Жизненный цикл приложения."""
        await log_info("TransportConnect API запускается...", type_msg=TypeMsg.INFO)

        owns_dependencies = services is None
        app.state.services = await init_dependencies() if owns_dependencies else services

        yield

        if owns_dependencies:
            await close_dependencies()
        await log_info("TransportConnect API остановлен", type_msg=TypeMsg.INFO)

    app = FastAPI(
        title="TransportConnect API",
        description="Пользователи, аутентификация и жизненный цикл заявок на перевозку",
        version=settings.system.VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    if services is not None:
        app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CoreError, core_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    prefix = settings.api.API_PREFIX
    app.include_router(auth_router, prefix=prefix)
    app.include_router(offers_router, prefix=prefix)
    app.include_router(requests_router, prefix=prefix)
    app.include_router(admin_router, prefix=prefix)

    @app.get("/health", response_model=HealthStatus, tags=["Health"])
    async def health_check() -> HealthStatus:
        """Проверка здоровья сервиса."""
        from transport_connect.infra.database import get_db
        from transport_connect.infra.event_bus import get_event_bus
        from transport_connect.infra.redis_client import get_redis

        deps: dict[str, str] = {}
        if settings.database.DB_ENABLED and services is None:
            deps["postgres"] = "healthy" if await get_db().health_check() else "unhealthy"
        if settings.redis.REDIS_ENABLED and services is None:
            deps["redis"] = "healthy" if await get_redis().health_check() else "unhealthy"
        if settings.rabbitmq.RABBITMQ_ENABLED and services is None:
            deps["rabbitmq"] = "healthy" if await get_event_bus().health_check() else "unhealthy"

        overall = "healthy" if all(v == "healthy" for v in deps.values()) else "degraded"
        return HealthStatus(
            service="transport_connect",
            status=overall,
            version=settings.system.VERSION,
            dependencies=deps,
        )

    return app


def get_app() -> FastAPI:
    """Фабрика для uvicorn (--factory)."""
    setup_logging()
    return create_app()
