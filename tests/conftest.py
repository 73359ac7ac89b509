# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import itertools
import json
import os
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Awaitable, Callable
from unittest.mock import AsyncMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key-for-session-tokens-0123456789")
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("REDIS_PASSWORD", "")
os.environ.setdefault("RABBITMQ_PASSWORD", "guest")

from transport_connect.api.dependencies import Services, build_memory_services  # noqa: E402
from transport_connect.common.constants import UserRole  # noqa: E402
from transport_connect.core.auth.tokens import TokenService  # noqa: E402
from transport_connect.core.identity import passwords  # noqa: E402
from transport_connect.core.identity.models import Identity, RegistrationDTO  # noqa: E402
from transport_connect.core.offers.models import TransportOffer  # noqa: E402
from transport_connect.core.transport_requests.models import TransportRequest  # noqa: E402
from transport_connect.infra.memory import InMemoryDatabase  # noqa: E402

TEST_SECRET = "test-secret-key-for-session-tokens-0123456789"
DEFAULT_PASSWORD = "secret123"


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "Системные настройки",
        "PROJECT_NAME": "transport_connect_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_MAX_BYTES": 1048576,
        "API_HOST": "127.0.0.1",
        "API_PORT": 5001,
        "API_PREFIX": "/api/v1",
        "CORS_ORIGINS": ["http://localhost:3000"],
        "DB_ENABLED": False,
        "DB_HOST": "db.test",
        "DB_PORT": 5433,
        "DB_NAME": "transport_connect_test",
        "DB_USER": "tester",
        "DB_MIN_POOL_SIZE": 1,
        "DB_MAX_POOL_SIZE": 2,
        "DB_COMMAND_TIMEOUT": 5,
        "REDIS_ENABLED": False,
        "REDIS_HOST": "redis.test",
        "REDIS_PORT": 6380,
        "REDIS_DB": 1,
        "REDIS_NAMESPACE": "transport_test",
        "REDIS_MAX_CONNECTIONS": 5,
        "RABBITMQ_ENABLED": False,
        "RABBITMQ_HOST": "rabbit.test",
        "RABBITMQ_PORT": 5673,
        "RABBITMQ_USER": "tester",
        "RABBITMQ_VHOST": "/test",
        "RABBITMQ_EXCHANGE": "transport.test",
        "RABBITMQ_PREFETCH_COUNT": 3,
        "AUTH_ALGORITHM": "HS256",
        "AUTH_TOKEN_TTL_DAYS": 7,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2), encoding="utf-8")
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetchval = AsyncMock(return_value=None)
    return db


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Мок клиента Redis."""
    redis = AsyncMock()
    redis.set = AsyncMock(return_value=True)
    redis.exists = AsyncMock(return_value=False)
    return redis


@pytest.fixture
def mock_event_bus() -> AsyncMock:
    """Мок шины событий."""
    event_bus = AsyncMock()
    event_bus.publish = AsyncMock(return_value=None)
    event_bus.is_connected = True
    return event_bus


@pytest.fixture
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Снижает стоимость bcrypt, чтобы тесты сервисов шли быстро."""
    monkeypatch.setattr(passwords, "BCRYPT_ROUNDS", 4)


# =============================================================================
# ФИКСТУРЫ СЕРВИСОВ (ХРАНИЛИЩЕ В ПАМЯТИ)
# =============================================================================

@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=TEST_SECRET, ttl=timedelta(days=30))


@pytest.fixture
def storage() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def services(
    fast_bcrypt: None,
    storage: InMemoryDatabase,
    token_service: TokenService,
    mock_event_bus: AsyncMock,
) -> Services:
    """Полный набор сервисов поверх хранилища в памяти."""
    return build_memory_services(tokens=token_service, storage=storage, event_bus=mock_event_bus)


@pytest.fixture
def make_identity(services: Services) -> Callable[..., Awaitable[Identity]]:
    """Фабрика пользователей (напрямую через хранилище, любая роль)."""
    counter = itertools.count(1)

    async def factory(
        role: UserRole,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ) -> Identity:
        number = next(counter)
        identity = await services.store.create(RegistrationDTO(
            first_name=f"{role.value.title()}",
            last_name=f"Test{number}",
            email=email or f"{role.value}{number}@example.com",
            password=password,
            role=role,
            phone=f"+3805012345{number:02d}",
        ))
        if not is_active:
            identity = await services.store.set_active(identity.id, False)
        return identity

    return factory


@pytest.fixture
def offer_payload() -> dict[str, Any]:
    """Данные объявления водителя."""
    return {
        "departure_city": "Kyiv",
        "destination_city": "Lviv",
        "departure_date": (date.today() + timedelta(days=3)).isoformat(),
        "vehicle_type": "van",
        "capacity_kg": "1500",
        "price_per_kg": "2.50",
        "description": "Перевозка по трассе М06",
    }


@pytest.fixture
def make_offer(services: Services, offer_payload: dict[str, Any]) -> Callable[..., Awaitable[TransportOffer]]:
    async def factory(driver: Identity, **overrides: Any) -> TransportOffer:
        return await services.offers.create_offer(driver, {**offer_payload, **overrides})

    return factory


@pytest.fixture
def request_payload() -> dict[str, Any]:
    """Данные заявки отправителя (без offer_id)."""
    return {
        "cargo": {
            "type": "furniture",
            "weight_kg": "120",
            "dimensions": {"length": "200", "width": "90", "height": "80"},
            "description": "Шкаф в разобранном виде",
        },
        "pickup_location": "Kyiv, Khreshchatyk 1",
        "delivery_location": "Lviv, Rynok Square 5",
        "notes": "Позвонить за час",
    }


@pytest.fixture
def make_request(
    services: Services,
    request_payload: dict[str, Any],
) -> Callable[..., Awaitable[TransportRequest]]:
    async def factory(sender: Identity, offer: TransportOffer, **overrides: Any) -> TransportRequest:
        return await services.engine.create_request(
            sender, {**request_payload, "offer_id": offer.id, **overrides}
        )

    return factory
