# transport_connect/core/auth/denylist.py
"""
Список отозванных токенов (logout).

Ключ: jti токена. Запись живёт до истечения срока действия токена,
после чего токен отвергается проверкой exp сам по себе.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

from redis.exceptions import RedisError

from transport_connect.common.exceptions import InternalFailure
from transport_connect.common.logger import log_error
from transport_connect.infra.redis_client import RedisClient


class TokenDenylist(ABC):
    """Контракт хранилища отозванных токенов."""

    @abstractmethod
    async def revoke(self, token_id: str, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    async def is_revoked(self, token_id: str) -> bool:
        ...


class InMemoryTokenDenylist(TokenDenylist):
    """Отозванные токены в памяти процесса (теряются при перезапуске)."""

    def __init__(self) -> None:
        self._revoked: dict[str, float] = {}

    async def revoke(self, token_id: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        self._revoked[token_id] = time.monotonic() + ttl_seconds

    async def is_revoked(self, token_id: str) -> bool:
        expires = self._revoked.get(token_id)
        if expires is None:
            return False
        if expires <= time.monotonic():
            del self._revoked[token_id]
            return False
        return True

    def clear(self) -> None:
        self._revoked.clear()


class RedisTokenDenylist(TokenDenylist):
    """
    Отозванные токены в Redis (общие для всех инстансов API).

    Недоступность Redis при проверке трактуется как отказ:
    вызывающий получает InternalFailure, а не доступ.
    """

    def __init__(self, redis: RedisClient) -> None:
        self._redis = redis

    @staticmethod
    def _key(token_id: str) -> str:
        return f"revoked:token:{token_id}"

    async def revoke(self, token_id: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        try:
            await self._redis.set(self._key(token_id), "1", ttl=ttl_seconds)
        except RedisError as e:
            await log_error(f"Не удалось отозвать токен: {e}")
            raise InternalFailure() from e

    async def is_revoked(self, token_id: str) -> bool:
        try:
            return await self._redis.exists(self._key(token_id))
        except RedisError as e:
            await log_error(f"Не удалось проверить отзыв токена: {e}")
            raise InternalFailure() from e
