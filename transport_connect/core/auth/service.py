# transport_connect/core/auth/service.py
"""
Аутентификация: регистрация, вход, проверка токена, выход.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import pydantic

from transport_connect.common.constants import TypeMsg, UserRole
from transport_connect.common.exceptions import (
    AccountInactive,
    IdentityNotFound,
    InvalidCredentials,
    InvalidToken,
    ValidationError,
    validation_error_from_pydantic,
)
from transport_connect.common.logger import log_info
from transport_connect.core.auth.denylist import TokenDenylist
from transport_connect.core.auth.tokens import TokenClaims, TokenService
from transport_connect.core.identity.models import Identity, IdentitySummary, RegistrationDTO
from transport_connect.core.identity.passwords import burn_verification
from transport_connect.core.identity.store import CredentialStore
from transport_connect.infra.event_bus import DomainEvent, EventBus, EventTypes

# Роли, доступные при самостоятельной регистрации
PUBLIC_ROLES: frozenset[UserRole] = frozenset({UserRole.DRIVER, UserRole.SENDER})


@dataclass(frozen=True)
class AuthResult:
    """Пользователь и выпущенный для него токен."""
    identity: Identity
    token: str


class Authenticator:
    """
    Сервис аутентификации.

    Хэши паролей не покидают CredentialStore, а токены не логируются.
    """

    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenService,
        denylist: Optional[TokenDenylist] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        """
        Инициализация сервиса.

        Args:
            store: Хранилище учётных данных
            tokens: Выпуск и проверка токенов
            denylist: Список отозванных токенов (без него logout ничего не отзывает)
            event_bus: Шина событий
        """
        self._store = store
        self._tokens = tokens
        self._denylist = denylist
        self._event_bus = event_bus

    async def register(
        self,
        first_name: Any,
        last_name: Any,
        email: Any,
        password: Any,
        role: Any,
        phone: Any,
    ) -> AuthResult:
        """
        Регистрирует водителя или отправителя и сразу выдаёт токен.

        Raises:
            ValidationError: Поля отсутствуют или некорректны
            DuplicateIdentity: Email уже зарегистрирован
        """
        try:
            registration = RegistrationDTO(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password=password,
                role=role,
                phone=phone,
            )
        except pydantic.ValidationError as e:
            raise validation_error_from_pydantic(e) from e

        if registration.role not in PUBLIC_ROLES:
            raise ValidationError("Role must be driver or sender", fields={"role": "Role must be driver or sender"})

        identity = await self._store.create(registration)
        token = self._tokens.issue(identity.id, identity.role)

        if self._event_bus is not None:
            await self._event_bus.publish(DomainEvent(
                event_type=EventTypes.IDENTITY_REGISTERED,
                payload={"identity_id": identity.id, "role": identity.role.value},
            ))

        return AuthResult(identity=identity, token=token)

    async def login(self, email: Any, password: Any) -> AuthResult:
        """
        Вход по email и паролю.

        Неизвестный email и неверный пароль неразличимы ни по сообщению,
        ни по времени ответа. Деактивация проверяется только после
        совпадения пароля.

        Raises:
            InvalidCredentials: Неверный email или пароль
            AccountInactive: Учётная запись деактивирована
        """
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise ValidationError("Please provide email and password")

        identity = await self._store.find_by_email(email)
        if identity is None:
            await burn_verification(password)
            await log_info("Неудачная попытка входа: неизвестный email", type_msg=TypeMsg.WARNING)
            raise InvalidCredentials()

        if not await self._store.check_password(identity, password):
            await log_info(f"Неудачная попытка входа пользователя {identity.id}", type_msg=TypeMsg.WARNING)
            raise InvalidCredentials()

        if not identity.is_active:
            await log_info(f"Вход деактивированного пользователя {identity.id} отклонён", type_msg=TypeMsg.WARNING)
            raise AccountInactive()

        token = self._tokens.issue(identity.id, identity.role)
        await log_info(f"Пользователь {identity.id} вошёл в систему", type_msg=TypeMsg.INFO)
        return AuthResult(identity=identity, token=token)

    async def authenticate(self, token: str) -> tuple[Identity, TokenClaims]:
        """
        Проверяет токен и возвращает пользователя вместе с claims.

        Raises:
            InvalidToken: Подпись неверна, токен просрочен или отозван
            IdentityNotFound: Пользователь удалён
            AccountInactive: Пользователь деактивирован после выдачи токена
        """
        claims = self._tokens.decode(token)

        if self._denylist is not None and await self._denylist.is_revoked(claims.token_id):
            raise InvalidToken("Token has been revoked")

        identity = await self._store.find_by_id(claims.subject)
        if identity is None:
            raise IdentityNotFound()
        if not identity.is_active:
            raise AccountInactive()

        return identity, claims

    async def validate(self, token: str) -> Identity:
        identity, _ = await self.authenticate(token)
        return identity

    async def logout(self, token: str) -> None:
        """Отзывает токен до истечения его срока действия."""
        claims = self._tokens.decode(token)
        if self._denylist is None:
            return
        await self._denylist.revoke(claims.token_id, claims.remaining_seconds())
        await log_info(f"Пользователь {claims.subject} вышел из системы", type_msg=TypeMsg.INFO)

    async def me(self, identity: Identity) -> IdentitySummary:
        return identity.summary()
