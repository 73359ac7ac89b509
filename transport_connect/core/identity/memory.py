# transport_connect/core/identity/memory.py
"""Репозиторий пользователей в памяти процесса."""

from __future__ import annotations

from typing import Optional

from transport_connect.common.exceptions import DuplicateIdentity, NotFound
from transport_connect.core.identity.models import (
    Identity,
    IdentityCreateDTO,
    IdentityStatistics,
    utc_now,
)
from transport_connect.core.identity.repository import IdentityRepository
from transport_connect.infra.memory import InMemoryDatabase


class InMemoryIdentityRepository(IdentityRepository):
    """Хранит пользователей в InMemoryDatabase. Возвращает копии записей."""

    def __init__(self, storage: InMemoryDatabase) -> None:
        self._storage = storage

    async def get_by_id(self, identity_id: int) -> Optional[Identity]:
        identity = self._storage.identities.get(identity_id)
        return identity.model_copy(deep=True) if identity else None

    async def get_by_email(self, email: str) -> Optional[Identity]:
        for identity in self._storage.identities.values():
            if identity.email == email:
                return identity.model_copy(deep=True)
        return None

    async def create(self, dto: IdentityCreateDTO) -> Identity:
        async with self._storage.identities_lock:
            if any(i.email == dto.email for i in self._storage.identities.values()):
                raise DuplicateIdentity()

            now = utc_now()
            identity = Identity(
                id=self._storage.next_identity_id(),
                created_at=now,
                updated_at=now,
                **dto.model_dump(),
            )
            self._storage.identities[identity.id] = identity
        return identity.model_copy(deep=True)

    async def update(self, identity: Identity) -> Identity:
        async with self._storage.row_lock("identities", identity.id):
            current = self._storage.identities.get(identity.id)
            if current is None:
                raise NotFound("User not found")

            stored = current.model_copy(
                update={
                    "first_name": identity.first_name,
                    "last_name": identity.last_name,
                    "password_hash": identity.password_hash,
                    "phone": identity.phone,
                    "is_verified": identity.is_verified,
                    "is_active": identity.is_active,
                    "updated_at": utc_now(),
                },
                deep=True,
            )
            self._storage.identities[identity.id] = stored
        return stored.model_copy(deep=True)

    async def _update_fields(self, identity_id: int, **fields: object) -> Identity:
        async with self._storage.row_lock("identities", identity_id):
            current = self._storage.identities.get(identity_id)
            if current is None:
                raise NotFound("User not found")

            stored = current.model_copy(update={**fields, "updated_at": utc_now()}, deep=True)
            self._storage.identities[identity_id] = stored
        return stored.model_copy(deep=True)

    async def set_active(self, identity_id: int, is_active: bool) -> Identity:
        return await self._update_fields(identity_id, is_active=is_active)

    async def set_verified(self, identity_id: int) -> Identity:
        return await self._update_fields(identity_id, is_verified=True)

    async def set_password_hash(self, identity_id: int, password_hash: str) -> Identity:
        return await self._update_fields(identity_id, password_hash=password_hash)

    async def get_statistics(self) -> IdentityStatistics:
        return IdentityStatistics.from_identities(list(self._storage.identities.values()))
