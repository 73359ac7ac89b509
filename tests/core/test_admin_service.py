# tests/core/test_admin_service.py
"""
Тесты для сервиса администратора.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from transport_connect.api.dependencies import Services
from transport_connect.common.constants import UserRole
from transport_connect.common.exceptions import AccountInactive, Forbidden, NotFound
from transport_connect.infra.event_bus import EventTypes


class TestUserModeration:
    """Тесты для активации и верификации пользователей."""

    @pytest.mark.asyncio
    async def test_suspend_and_activate(
        self,
        services: Services,
        make_identity: Any,
        mock_event_bus: AsyncMock,
    ) -> None:
        admin = await make_identity(UserRole.ADMIN)
        driver = await make_identity(UserRole.DRIVER)

        suspended = await services.admin.set_active(admin, driver.id, False)
        assert suspended.is_active is False
        assert mock_event_bus.publish.call_args.args[0].event_type == EventTypes.IDENTITY_SUSPENDED

        with pytest.raises(AccountInactive):
            await services.authenticator.login(driver.email, "secret123")

        activated = await services.admin.set_active(admin, driver.id, True)
        assert activated.is_active is True
        assert mock_event_bus.publish.call_args.args[0].event_type == EventTypes.IDENTITY_ACTIVATED
        assert (await services.authenticator.login(driver.email, "secret123")).identity.id == driver.id

    @pytest.mark.asyncio
    async def test_set_active_keeps_password(self, services: Services, make_identity: Any) -> None:
        admin = await make_identity(UserRole.ADMIN)
        sender = await make_identity(UserRole.SENDER)

        updated = await services.admin.set_active(admin, sender.id, False)

        assert updated.password_hash == sender.password_hash

    @pytest.mark.asyncio
    async def test_verify(self, services: Services, make_identity: Any, mock_event_bus: AsyncMock) -> None:
        admin = await make_identity(UserRole.ADMIN)
        driver = await make_identity(UserRole.DRIVER)

        verified = await services.admin.verify(admin, driver.id)

        assert verified.is_verified is True
        assert mock_event_bus.publish.call_args.args[0].event_type == EventTypes.IDENTITY_VERIFIED

    @pytest.mark.asyncio
    async def test_verify_does_not_revert_concurrent_suspend(self, services: Services, make_identity: Any) -> None:
        """Верификация по устаревшей записи не возвращает is_active и пароль."""
        admin = await make_identity(UserRole.ADMIN)
        driver = await make_identity(UserRole.DRIVER)

        await services.admin.set_active(admin, driver.id, False)
        await services.store.set_password(driver, "another456")

        with patch.object(services.store, "find_by_id", AsyncMock(return_value=driver)):
            verified = await services.admin.verify(admin, driver.id)

        assert verified.is_verified is True
        assert verified.is_active is False
        assert await services.store.check_password(verified, "another456")

    @pytest.mark.asyncio
    async def test_unknown_user(self, services: Services, make_identity: Any) -> None:
        admin = await make_identity(UserRole.ADMIN)

        with pytest.raises(NotFound):
            await services.admin.verify(admin, 999)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [UserRole.DRIVER, UserRole.SENDER])
    async def test_non_admin_is_forbidden(self, services: Services, make_identity: Any, role: UserRole) -> None:
        actor = await make_identity(role)
        target = await make_identity(UserRole.SENDER)

        with pytest.raises(Forbidden):
            await services.admin.set_active(actor, target.id, False)
        with pytest.raises(Forbidden):
            await services.admin.verify(actor, target.id)
        with pytest.raises(Forbidden):
            await services.admin.list_offers(actor)
        with pytest.raises(Forbidden):
            await services.admin.get_statistics(actor)


class TestOfferModeration:
    """Тесты для модерации объявлений."""

    @pytest.mark.asyncio
    async def test_list_and_delete_offer(
        self,
        services: Services,
        make_identity: Any,
        make_offer: Any,
        make_request: Any,
    ) -> None:
        admin = await make_identity(UserRole.ADMIN)
        driver = await make_identity(UserRole.DRIVER)
        sender = await make_identity(UserRole.SENDER)
        offer = await make_offer(driver)
        request = await make_request(sender, offer)

        assert [o.id for o in await services.admin.list_offers(admin)] == [offer.id]

        await services.admin.delete_offer(admin, offer.id)

        assert await services.admin.list_offers(admin) == []
        with pytest.raises(NotFound):
            await services.engine.get_request(sender, request.id)

    @pytest.mark.asyncio
    async def test_delete_missing_offer(self, services: Services, make_identity: Any) -> None:
        admin = await make_identity(UserRole.ADMIN)

        with pytest.raises(NotFound):
            await services.admin.delete_offer(admin, "missing")


class TestStatistics:
    """Тесты для сводной статистики."""

    @pytest.mark.asyncio
    async def test_dashboard_counts(
        self,
        services: Services,
        make_identity: Any,
        make_offer: Any,
        make_request: Any,
    ) -> None:
        admin = await make_identity(UserRole.ADMIN)
        driver = await make_identity(UserRole.DRIVER)
        sender = await make_identity(UserRole.SENDER)
        offer = await make_offer(driver)
        request = await make_request(sender, offer)
        await services.engine.transition(request.id, driver, "accepted")
        await make_request(sender, offer)

        stats = await services.admin.get_statistics(admin)

        assert stats.users.total == 3
        assert stats.users.drivers == 1
        assert stats.users.senders == 1
        assert stats.users.admins == 1
        assert stats.offers.total == 1
        assert stats.requests.total == 2
        assert stats.requests.by_status == {"accepted": 1, "pending": 1}
