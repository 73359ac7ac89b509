# transport_connect/core/identity/passwords.py
"""
Хэширование паролей (bcrypt).

Стоимость фиксирована и не зависит от входных данных.
bcrypt CPU-bound, поэтому вызовы уходят в поток через asyncio.to_thread
и не блокируют event loop.
"""

from __future__ import annotations

import asyncio
import re

import bcrypt

from transport_connect.common.exceptions import InternalFailure
from transport_connect.common.logger import log_error
from transport_connect.core.identity.models import PASSWORD_MAX_BYTES

BCRYPT_ROUNDS = 12

DIGEST_RE = re.compile(r"^\$2[abxy]\$(\d{2})\$[./A-Za-z0-9]{53}$")

# Хэш для сравнения при неизвестном email (вычисляется один раз)
_dummy_digest: bytes | None = None


def is_password_digest(value: str) -> bool:
    """Проверяет, что строка уже является bcrypt-хэшем."""
    return bool(DIGEST_RE.match(value))


def _hash_sync(plaintext: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("ascii")


def _verify_sync(plaintext: str, digest: str) -> bool:
    return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("ascii"))


async def hash_password(plaintext: str) -> str:
    """
    Хэширует открытый пароль.

    Пароль, похожий на bcrypt-хэш, тоже хэшируется: пользователь
    входит ровно с тем паролем, который ввёл.

    Raises:
        InternalFailure: Ошибка библиотеки bcrypt
    """
    try:
        return await asyncio.to_thread(_hash_sync, plaintext)
    except ValueError as e:
        await log_error(f"Ошибка хэширования пароля: {e}")
        raise InternalFailure() from e


async def ensure_digest(value: str) -> str:
    """
    Возвращает хэш для поля password_hash сохраняемой записи.

    Готовый хэш возвращается как есть, открытый пароль хэшируется.
    Только для записей, уже прочитанных из хранилища.
    """
    if is_password_digest(value):
        return value
    return await hash_password(value)


async def verify_password(plaintext: str, digest: str) -> bool:
    """
    Сравнивает пароль с хэшем.

    Returns:
        True если пароль совпадает. Слишком длинный пароль или
        строка не в формате bcrypt дают False.

    Raises:
        InternalFailure: Ошибка библиотеки bcrypt
    """
    if len(plaintext.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return False
    if not is_password_digest(digest):
        return False

    try:
        return await asyncio.to_thread(_verify_sync, plaintext, digest)
    except ValueError as e:
        await log_error(f"Ошибка проверки пароля: {e}")
        raise InternalFailure() from e


async def burn_verification(plaintext: str) -> None:
    """
    Выполняет полную проверку пароля против фиктивного хэша.

    Вход с неизвестным email тратит столько же времени,
    сколько вход с неверным паролем.
    """
    global _dummy_digest
    if _dummy_digest is None:
        _dummy_digest = (await asyncio.to_thread(_hash_sync, "transport-connect-dummy")).encode("ascii")

    candidate = plaintext.encode("utf-8")[:PASSWORD_MAX_BYTES]
    await asyncio.to_thread(bcrypt.checkpw, candidate, _dummy_digest)
