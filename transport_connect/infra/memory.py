# transport_connect/infra/memory.py
"""
Хранилище в памяти процесса.

Используется для локального запуска без PostgreSQL и в тестах.
Репозитории в памяти делят один экземпляр, чтобы атомарные операции,
затрагивающие несколько сущностей (завершение перевозки + счётчик водителя),
выполнялись под одной блокировкой.
"""

from __future__ import annotations

import asyncio
import itertools
import weakref
from typing import Any


class InMemoryDatabase:
    """Таблицы в виде словарей и блокировки по ключу ресурса."""

    def __init__(self) -> None:
        self.identities: dict[int, Any] = {}
        self.offers: dict[str, Any] = {}
        self.requests: dict[str, Any] = {}
        self._identity_ids = itertools.count(1)
        # Блокировка на уникальность email и на каждую строку
        self.identities_lock = asyncio.Lock()
        self._row_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def next_identity_id(self) -> int:
        return next(self._identity_ids)

    def row_lock(self, table: str, key: object) -> asyncio.Lock:
        """
        Блокировка отдельной строки (аналог SELECT ... FOR UPDATE).

        Блокировка живёт, пока её держат или ждут; словарь не растёт
        с числом когда-либо изменённых строк.
        """
        name = f"{table}:{key}"
        lock = self._row_locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            self._row_locks[name] = lock
        return lock

    def clear(self) -> None:
        self.identities.clear()
        self.offers.clear()
        self.requests.clear()
        self._row_locks.clear()
        self._identity_ids = itertools.count(1)
