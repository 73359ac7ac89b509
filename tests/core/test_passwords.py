# tests/core/test_passwords.py
"""
Тесты для хэширования паролей.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from transport_connect.common.exceptions import InternalFailure
from transport_connect.core.identity.passwords import (
    BCRYPT_ROUNDS,
    burn_verification,
    ensure_digest,
    hash_password,
    is_password_digest,
    verify_password,
)


class TestIsPasswordDigest:
    """Тесты для распознавания bcrypt-хэша."""

    def test_recognises_bcrypt_digest(self) -> None:
        digest = "$2b$12$" + "a" * 53
        assert is_password_digest(digest) is True

    @pytest.mark.parametrize("value", [
        "secret123",
        "$2a$",
        "$2b$12$short",
        "$2b$12$" + "a" * 52,
        "$3b$12$" + "a" * 53,
        "$2b$1$" + "a" * 54,
        "",
    ])
    def test_rejects_non_digest(self, value: str) -> None:
        """Голый префикс или обрезанный хэш не считаются хэшем."""
        assert is_password_digest(value) is False


class TestHashPassword:
    """Тесты для hash_password (реальная стоимость bcrypt)."""

    def test_cost_is_fixed(self) -> None:
        assert BCRYPT_ROUNDS == 12

    @pytest.mark.asyncio
    async def test_hash_is_salted_digest(self) -> None:
        first = await hash_password("secret123")
        second = await hash_password("secret123")

        assert is_password_digest(first)
        assert first.startswith("$2b$12$")
        assert first != second

    @pytest.mark.asyncio
    async def test_digest_shaped_secret_is_hashed(self, fast_bcrypt: None) -> None:
        digest = await hash_password("secret123")

        rehashed = await hash_password(digest)

        assert rehashed != digest
        assert await verify_password(digest, rehashed)


class TestEnsureDigest:
    """Тесты для ensure_digest."""

    @pytest.mark.asyncio
    async def test_existing_digest_is_kept(self, fast_bcrypt: None) -> None:
        """Повторное сохранение готового хэша ничего не меняет."""
        digest = await hash_password("secret123")

        assert await ensure_digest(digest) == digest
        assert await verify_password("secret123", await ensure_digest(digest))

    @pytest.mark.asyncio
    async def test_plaintext_is_hashed(self, fast_bcrypt: None) -> None:
        digest = await ensure_digest("secret123")

        assert is_password_digest(digest)
        assert await verify_password("secret123", digest)


class TestVerifyPassword:
    """Тесты для verify_password."""

    @pytest.mark.asyncio
    async def test_correct_and_wrong_password(self, fast_bcrypt: None) -> None:
        digest = await hash_password("secret123")

        assert await verify_password("secret123", digest) is True
        assert await verify_password("secret124", digest) is False

    @pytest.mark.asyncio
    async def test_too_long_password_is_rejected(self, fast_bcrypt: None) -> None:
        digest = await hash_password("x" * 72)
        assert await verify_password("x" * 73, digest) is False

    @pytest.mark.asyncio
    async def test_broken_digest_is_rejected(self) -> None:
        assert await verify_password("secret123", "not-a-digest") is False

    @pytest.mark.asyncio
    async def test_burn_verification_completes(self, fast_bcrypt: None) -> None:
        await burn_verification("whatever")
        await burn_verification("ы" * 100)

    @pytest.mark.asyncio
    async def test_library_error_is_internal_failure(self, fast_bcrypt: None) -> None:
        """Сбой bcrypt не выдаётся за неверный пароль."""
        digest = await hash_password("secret123")

        with patch("transport_connect.core.identity.passwords.bcrypt.checkpw", side_effect=ValueError("Invalid salt")), \
                patch("transport_connect.core.identity.passwords.log_error", new_callable=AsyncMock) as log_error:
            with pytest.raises(InternalFailure):
                await verify_password("secret123", digest)

        log_error.assert_awaited_once()
