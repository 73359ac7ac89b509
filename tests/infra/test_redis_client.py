# tests/infra/test_redis_client.py
"""
Тесты для клиента Redis.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
import redis.asyncio as redis

from transport_connect.infra.redis_client import RedisClient


class TestRedisClient:
    """Тесты для RedisClient."""

    @pytest.fixture
    def redis_client(self) -> RedisClient:
        """Создаёт экземпляр RedisClient для тестов."""
        # Сбрасываем синглтон для каждого теста
        RedisClient._instance = None
        client = RedisClient()
        client._client = None
        client._namespace = "transport"
        return client

    @pytest.fixture
    def connected_client(self, redis_client: RedisClient) -> RedisClient:
        redis_client._client = AsyncMock()
        return redis_client

    def test_singleton(self) -> None:
        RedisClient._instance = None

        assert RedisClient() is RedisClient()

    def test_client_not_initialized(self, redis_client: RedisClient) -> None:
        with pytest.raises(RuntimeError, match="Redis клиент не инициализирован"):
            _ = redis_client.client

    def test_make_key(self, redis_client: RedisClient) -> None:
        assert redis_client._make_key("revoked:token:abc") == "transport:revoked:token:abc"

    @pytest.mark.asyncio
    async def test_connect(self, redis_client: RedisClient) -> None:
        mock_client = AsyncMock()

        with patch("redis.asyncio.from_url", return_value=mock_client) as from_url:
            await redis_client.connect(url="redis://localhost:6379/0", namespace="tc")

        from_url.assert_called_once()
        mock_client.ping.assert_awaited_once()
        assert redis_client._namespace == "tc"
        assert redis_client.is_connected is True

    @pytest.mark.asyncio
    async def test_disconnect(self, connected_client: RedisClient) -> None:
        inner = connected_client._client

        await connected_client.disconnect()

        inner.aclose.assert_awaited_once()
        assert connected_client.is_connected is False

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, connected_client: RedisClient) -> None:
        connected_client._client.set = AsyncMock(return_value=True)

        result = await connected_client.set("key", "1", ttl=60)

        assert result is True
        connected_client._client.set.assert_awaited_once_with("transport:key", "1", ex=60)

    @pytest.mark.asyncio
    async def test_exists(self, connected_client: RedisClient) -> None:
        connected_client._client.exists = AsyncMock(return_value=1)
        assert await connected_client.exists("key") is True

        connected_client._client.exists = AsyncMock(return_value=0)
        assert await connected_client.exists("key") is False

    @pytest.mark.asyncio
    async def test_health_check_failure(self, connected_client: RedisClient) -> None:
        connected_client._client.ping = AsyncMock(side_effect=redis.ConnectionError("down"))

        with patch("transport_connect.infra.redis_client.log_error", new_callable=AsyncMock):
            assert await connected_client.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_not_connected(self, redis_client: RedisClient) -> None:
        with patch("transport_connect.infra.redis_client.log_error", new_callable=AsyncMock):
            assert await redis_client.health_check() is False
