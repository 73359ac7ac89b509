# transport_connect/core/auth/tokens.py
"""
Токены сессии (JWT, HMAC-подпись).

Токен не хранится на сервере: проверка подписи и срока действия
не требует обращения к БД.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from transport_connect.common.constants import UserRole
from transport_connect.common.exceptions import InternalFailure, InvalidToken

# Минимальная длина секрета для HS256
MIN_SECRET_LENGTH = 32


@dataclass(frozen=True)
class TokenClaims:
    """Проверенное содержимое токена."""
    subject: int
    role: UserRole
    issued_at: datetime
    expires_at: datetime
    token_id: str

    def remaining_seconds(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        return max(0, int((self.expires_at - now).total_seconds()))


class TokenService:
    """Выпуск и проверка подписанных токенов."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=30)) -> None:
        if len(secret) < MIN_SECRET_LENGTH:
            raise InternalFailure("Token signing key is not configured")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    @classmethod
    def from_settings(cls) -> TokenService:
        from transport_connect.config import settings

        return cls(
            secret=settings.auth.AUTH_SECRET_KEY,
            algorithm=settings.auth.AUTH_ALGORITHM,
            ttl=timedelta(days=settings.auth.AUTH_TOKEN_TTL_DAYS),
        )

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, identity_id: int, role: UserRole, now: datetime | None = None) -> str:
        """Выпускает токен для пользователя."""
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(identity_id),
            "role": role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
            "jti": secrets.token_hex(16),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        """
        Проверяет подпись и срок действия.

        Raises:
            InvalidToken: Подпись неверна, токен повреждён или просрочен
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "role", "iat", "exp", "jti"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidToken("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidToken() from e

        try:
            return TokenClaims(
                subject=int(payload["sub"]),
                role=UserRole(payload["role"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                token_id=str(payload["jti"]),
            )
        except (TypeError, ValueError) as e:
            raise InvalidToken() from e
