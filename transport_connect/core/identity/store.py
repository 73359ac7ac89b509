# transport_connect/core/identity/store.py
"""
Хранилище учётных данных.
Единственное место, где живут хэши паролей.
"""

from __future__ import annotations

from typing import Optional

from transport_connect.common.constants import TypeMsg
from transport_connect.common.logger import log_info
from transport_connect.core.identity.models import (
    Identity,
    IdentityCreateDTO,
    RegistrationDTO,
    normalize_email,
)
from transport_connect.core.identity.passwords import ensure_digest, hash_password, verify_password
from transport_connect.core.identity.repository import IdentityRepository


class CredentialStore:
    """
    Хранилище пользователей и хэшей паролей поверх репозитория.

    Поиск по email регистронезависимый: email нормализуется
    до обращения к репозиторию.
    """

    def __init__(self, repo: IdentityRepository) -> None:
        self._repo = repo

    @property
    def repository(self) -> IdentityRepository:
        return self._repo

    async def find_by_email(self, email: str) -> Optional[Identity]:
        return await self._repo.get_by_email(normalize_email(email))

    async def find_by_id(self, identity_id: int) -> Optional[Identity]:
        return await self._repo.get_by_id(identity_id)

    async def create(self, registration: RegistrationDTO, *, is_verified: bool = False) -> Identity:
        """
        Создаёт пользователя с хэшированным паролем.

        Пароль хэшируется всегда, даже если он выглядит как bcrypt-хэш.

        Raises:
            DuplicateIdentity: Email уже зарегистрирован
            InternalFailure: Ошибка БД или bcrypt
        """
        password_hash = await hash_password(registration.password)

        identity = await self._repo.create(
            IdentityCreateDTO(
                first_name=registration.first_name,
                last_name=registration.last_name,
                email=normalize_email(registration.email),
                password_hash=password_hash,
                role=registration.role,
                phone=registration.phone,
                is_verified=is_verified,
                is_active=True,
            )
        )
        await log_info(f"Зарегистрирован пользователь {identity.id} ({identity.role})", type_msg=TypeMsg.INFO)
        return identity

    async def save(self, identity: Identity) -> Identity:
        """
        Сохраняет все изменяемые поля пользователя.

        Если в password_hash по ошибке оказался открытый пароль,
        он будет захэширован. Готовый хэш сохраняется как есть.
        """
        digest = await ensure_digest(identity.password_hash)
        if digest != identity.password_hash:
            identity = identity.model_copy(update={"password_hash": digest})
        return await self._repo.update(identity)

    async def set_active(self, identity_id: int, is_active: bool) -> Identity:
        return await self._repo.set_active(identity_id, is_active)

    async def mark_verified(self, identity_id: int) -> Identity:
        return await self._repo.set_verified(identity_id)

    async def set_password(self, identity: Identity, plaintext: str) -> Identity:
        """Меняет пароль. Тот же пароль не перехэшируется."""
        if await verify_password(plaintext, identity.password_hash):
            return identity

        digest = await hash_password(plaintext)
        updated = await self._repo.set_password_hash(identity.id, digest)
        await log_info(f"Пароль пользователя {identity.id} изменён", type_msg=TypeMsg.INFO)
        return updated

    async def check_password(self, identity: Identity, plaintext: str) -> bool:
        return await verify_password(plaintext, identity.password_hash)
