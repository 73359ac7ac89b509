# transport_connect/api/dependencies.py
"""
Зависимости HTTP API: сборка сервисов и извлечение пользователя из токена.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from transport_connect.common.constants import TypeMsg
from transport_connect.common.exceptions import InvalidToken
from transport_connect.common.logger import log_info
from transport_connect.core.admin.service import AdminService
from transport_connect.core.auth.denylist import InMemoryTokenDenylist, RedisTokenDenylist, TokenDenylist
from transport_connect.core.auth.service import Authenticator
from transport_connect.core.auth.tokens import TokenService
from transport_connect.core.identity.memory import InMemoryIdentityRepository
from transport_connect.core.identity.models import Identity
from transport_connect.core.identity.repository import IdentityRepository, PostgresIdentityRepository
from transport_connect.core.identity.store import CredentialStore
from transport_connect.core.offers.memory import InMemoryOfferRepository
from transport_connect.core.offers.repository import OfferRepository, PostgresOfferRepository
from transport_connect.core.offers.service import OfferService
from transport_connect.core.transport_requests.memory import InMemoryTransportRequestRepository
from transport_connect.core.transport_requests.repository import (
    PostgresTransportRequestRepository,
    TransportRequestRepository,
)
from transport_connect.core.transport_requests.service import LifecycleEngine
from transport_connect.infra.database import close_db, init_db
from transport_connect.infra.event_bus import EventBus, close_event_bus, init_event_bus
from transport_connect.infra.memory import InMemoryDatabase
from transport_connect.infra.redis_client import close_redis, init_redis


@dataclass
class Services:
    """Сервисы ядра, доступные обработчикам запросов."""
    store: CredentialStore
    authenticator: Authenticator
    offers: OfferService
    engine: LifecycleEngine
    admin: AdminService


def build_services(
    identities: IdentityRepository,
    offers: OfferRepository,
    requests: TransportRequestRepository,
    tokens: TokenService,
    denylist: Optional[TokenDenylist] = None,
    event_bus: Optional[EventBus] = None,
) -> Services:
    """Собирает сервисы поверх заданных репозиториев."""
    store = CredentialStore(identities)
    return Services(
        store=store,
        authenticator=Authenticator(store, tokens, denylist=denylist, event_bus=event_bus),
        offers=OfferService(offers, event_bus=event_bus),
        engine=LifecycleEngine(requests, offers, event_bus=event_bus),
        admin=AdminService(store, offers, requests, event_bus=event_bus),
    )


def build_memory_services(
    tokens: Optional[TokenService] = None,
    storage: Optional[InMemoryDatabase] = None,
    denylist: Optional[TokenDenylist] = None,
    event_bus: Optional[EventBus] = None,
) -> Services:
    """Сервисы на хранилище в памяти (локальный запуск и тесты)."""
    storage = storage or InMemoryDatabase()
    return build_services(
        identities=InMemoryIdentityRepository(storage),
        offers=InMemoryOfferRepository(storage),
        requests=InMemoryTransportRequestRepository(storage),
        tokens=tokens or TokenService.from_settings(),
        denylist=denylist or InMemoryTokenDenylist(),
        event_bus=event_bus,
    )


async def init_dependencies() -> Services:
    """Подключает инфраструктуру согласно настройкам и собирает сервисы."""
    from transport_connect.config import settings

    tokens = TokenService.from_settings()
    event_bus = await init_event_bus() if settings.rabbitmq.RABBITMQ_ENABLED else None

    denylist: TokenDenylist
    if settings.redis.REDIS_ENABLED:
        denylist = RedisTokenDenylist(await init_redis())
    else:
        denylist = InMemoryTokenDenylist()

    if not settings.database.DB_ENABLED:
        await log_info("PostgreSQL отключён в настройках, используется хранилище в памяти", type_msg=TypeMsg.WARNING)
        return build_memory_services(tokens=tokens, denylist=denylist, event_bus=event_bus)

    db = await init_db()
    return build_services(
        identities=PostgresIdentityRepository(db),
        offers=PostgresOfferRepository(db),
        requests=PostgresTransportRequestRepository(db),
        tokens=tokens,
        denylist=denylist,
        event_bus=event_bus,
    )


async def close_dependencies() -> None:
    """Закрывает подключения к инфраструктуре."""
    from transport_connect.config import settings

    if settings.database.DB_ENABLED:
        await close_db()
    if settings.redis.REDIS_ENABLED:
        await close_redis()
    if settings.rabbitmq.RABBITMQ_ENABLED:
        await close_event_bus()


# =============================================================================
# FASTAPI DEPENDENCIES
# =============================================================================

bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    return request.app.state.services


async def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Токен из заголовка Authorization: Bearer <token>."""
    if credentials is None or not credentials.credentials:
        raise InvalidToken("Not authorized, no token")
    return credentials.credentials


async def get_current_identity(
    token: str = Depends(get_token),
    services: Services = Depends(get_services),
) -> Identity:
    return await services.authenticator.validate(token)
