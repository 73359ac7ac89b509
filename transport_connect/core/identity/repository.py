# transport_connect/core/identity/repository.py
"""
Репозиторий для работы с пользователями в БД.
Реализует паттерн Repository для абстракции доступа к данным.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import asyncpg

from transport_connect.common.constants import TypeMsg, UserRole
from transport_connect.common.exceptions import DuplicateIdentity, NotFound
from transport_connect.common.logger import log_info
from transport_connect.core.identity.models import (
    Identity,
    IdentityCreateDTO,
    IdentityStatistics,
    Rating,
    utc_now,
)
from transport_connect.infra.database import DatabaseManager, db_operation


_IDENTITY_COLUMNS = """
    id, first_name, last_name, email, password_hash, role, phone,
    is_verified, is_active, rating_average, rating_count,
    completed_transports, created_at, updated_at
"""

# Колонки, которые меняются точечным UPDATE
_SCOPED_COLUMNS = frozenset({"is_active", "is_verified", "password_hash"})


def row_to_identity(row: Any) -> Identity:
    """Преобразует строку таблицы identities в модель."""
    return Identity(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=UserRole(row["role"]),
        phone=row["phone"],
        is_verified=row["is_verified"],
        is_active=row["is_active"],
        rating=Rating(average=float(row["rating_average"]), count=row["rating_count"]),
        completed_transports=row["completed_transports"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class IdentityRepository(ABC):
    """Контракт хранилища пользователей."""

    @abstractmethod
    async def get_by_id(self, identity_id: int) -> Optional[Identity]:
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Поиск по email, уже приведённому к нижнему регистру."""
        ...

    @abstractmethod
    async def create(self, dto: IdentityCreateDTO) -> Identity:
        """
        Raises:
            DuplicateIdentity: Email уже занят
        """
        ...

    @abstractmethod
    async def update(self, identity: Identity) -> Identity:
        """Сохраняет изменяемые поля и обновляет updated_at."""
        ...

    @abstractmethod
    async def set_active(self, identity_id: int, is_active: bool) -> Identity:
        """Меняет только is_active. Остальные поля не перезаписываются."""
        ...

    @abstractmethod
    async def set_verified(self, identity_id: int) -> Identity:
        """Выставляет is_verified = TRUE."""
        ...

    @abstractmethod
    async def set_password_hash(self, identity_id: int, password_hash: str) -> Identity:
        """Меняет только хэш пароля."""
        ...

    @abstractmethod
    async def get_statistics(self) -> IdentityStatistics:
        ...


class PostgresIdentityRepository(IdentityRepository):
    """Репозиторий пользователей в PostgreSQL."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Инициализация репозитория.

        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def get_by_id(self, identity_id: int) -> Optional[Identity]:
        async with db_operation(f"чтение пользователя {identity_id}"):
            row = await self._db.fetchrow(
                f"SELECT {_IDENTITY_COLUMNS} FROM identities WHERE id = $1",
                identity_id,
            )
        return row_to_identity(row) if row else None

    async def get_by_email(self, email: str) -> Optional[Identity]:
        async with db_operation("поиск пользователя по email"):
            row = await self._db.fetchrow(
                f"SELECT {_IDENTITY_COLUMNS} FROM identities WHERE email = $1",
                email,
            )
        return row_to_identity(row) if row else None

    async def create(self, dto: IdentityCreateDTO) -> Identity:
        """
        Создаёт нового пользователя.

        Уникальность email обеспечивает индекс в БД, поэтому две
        одновременные регистрации не создадут дубликат.
        """
        now = utc_now()
        async with db_operation("создание пользователя"):
            try:
                row = await self._db.fetchrow(
                    f"""
                    INSERT INTO identities (first_name, last_name, email, password_hash,
                                            role, phone, is_verified, is_active,
                                            created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $9)
                    RETURNING {_IDENTITY_COLUMNS}
                    """,
                    dto.first_name,
                    dto.last_name,
                    dto.email,
                    dto.password_hash,
                    dto.role.value,
                    dto.phone,
                    dto.is_verified,
                    dto.is_active,
                    now,
                )
            except asyncpg.UniqueViolationError as e:
                raise DuplicateIdentity() from e

        identity = row_to_identity(row)
        await log_info(f"Пользователь {identity.id} создан ({identity.role})", type_msg=TypeMsg.DEBUG)
        return identity

    async def update(self, identity: Identity) -> Identity:
        async with db_operation(f"обновление пользователя {identity.id}"):
            row = await self._db.fetchrow(
                f"""
                UPDATE identities
                SET first_name = $2, last_name = $3, password_hash = $4, phone = $5,
                    is_verified = $6, is_active = $7, updated_at = $8
                WHERE id = $1
                RETURNING {_IDENTITY_COLUMNS}
                """,
                identity.id,
                identity.first_name,
                identity.last_name,
                identity.password_hash,
                identity.phone,
                identity.is_verified,
                identity.is_active,
                utc_now(),
            )
        if row is None:
            # Запись удалена между чтением и записью
            raise NotFound("User not found")
        return row_to_identity(row)

    async def _update_column(self, identity_id: int, column: str, value: object, operation: str) -> Identity:
        """Обновляет одну колонку, не трогая значения из ранее прочитанной записи."""
        if column not in _SCOPED_COLUMNS:
            raise ValueError(f"Колонка {column} не обновляется отдельно")

        async with db_operation(f"{operation} пользователя {identity_id}"):
            row = await self._db.fetchrow(
                f"""
                UPDATE identities
                SET {column} = $2, updated_at = $3
                WHERE id = $1
                RETURNING {_IDENTITY_COLUMNS}
                """,
                identity_id,
                value,
                utc_now(),
            )
        if row is None:
            raise NotFound("User not found")
        return row_to_identity(row)

    async def set_active(self, identity_id: int, is_active: bool) -> Identity:
        return await self._update_column(identity_id, "is_active", is_active, "смена статуса")

    async def set_verified(self, identity_id: int) -> Identity:
        return await self._update_column(identity_id, "is_verified", True, "верификация")

    async def set_password_hash(self, identity_id: int, password_hash: str) -> Identity:
        return await self._update_column(identity_id, "password_hash", password_hash, "смена пароля")

    async def get_statistics(self) -> IdentityStatistics:
        async with db_operation("статистика пользователей"):
            row = await self._db.fetchrow(
                """
                SELECT COUNT(*) AS total,
                       COUNT(*) FILTER (WHERE role = 'driver') AS drivers,
                       COUNT(*) FILTER (WHERE role = 'sender') AS senders,
                       COUNT(*) FILTER (WHERE role = 'admin') AS admins,
                       COUNT(*) FILTER (WHERE is_active) AS active,
                       COUNT(*) FILTER (WHERE is_verified) AS verified
                FROM identities
                """
            )
        return IdentityStatistics(**dict(row))
