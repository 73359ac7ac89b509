# transport_connect/core/admin/service.py
"""
Операции администратора: активация/деактивация и верификация
пользователей, модерация объявлений, сводная статистика.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from transport_connect.common.constants import Action, TypeMsg
from transport_connect.common.exceptions import NotFound
from transport_connect.common.logger import log_info
from transport_connect.core.access.policy import ensure_authorized
from transport_connect.core.identity.models import Identity, IdentityStatistics
from transport_connect.core.identity.store import CredentialStore
from transport_connect.core.offers.models import OfferStatistics, TransportOffer
from transport_connect.core.offers.repository import OfferRepository
from transport_connect.core.transport_requests.models import RequestStatistics
from transport_connect.core.transport_requests.repository import TransportRequestRepository
from transport_connect.infra.event_bus import DomainEvent, EventBus, EventTypes


class DashboardStatistics(BaseModel):
    """Сводка для панели администратора."""
    users: IdentityStatistics
    offers: OfferStatistics
    requests: RequestStatistics


class AdminService:
    """Сервис администратора. Каждая операция сначала проверяет политику доступа."""

    def __init__(
        self,
        store: CredentialStore,
        offers: OfferRepository,
        requests: TransportRequestRepository,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._store = store
        self._offers = offers
        self._requests = requests
        self._event_bus = event_bus

    async def _publish(self, event_type: str, payload: dict) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(DomainEvent(event_type=event_type, payload=payload))

    async def _get_identity(self, identity_id: int) -> Identity:
        identity = await self._store.find_by_id(identity_id)
        if identity is None:
            raise NotFound("User not found")
        return identity

    async def set_active(self, admin: Identity, identity_id: int, is_active: bool) -> Identity:
        """Активирует или деактивирует пользователя."""
        ensure_authorized(admin, Action.SET_USER_ACTIVE)

        identity = await self._get_identity(identity_id)
        if identity.is_active == is_active:
            return identity

        updated = await self._store.set_active(identity_id, is_active)
        state = "активирован" if is_active else "деактивирован"
        await log_info(f"Пользователь {identity_id} {state} администратором {admin.id}", type_msg=TypeMsg.INFO)
        await self._publish(
            EventTypes.IDENTITY_ACTIVATED if is_active else EventTypes.IDENTITY_SUSPENDED,
            {"identity_id": identity_id, "admin_id": admin.id},
        )
        return updated

    async def verify(self, admin: Identity, identity_id: int) -> Identity:
        """Подтверждает пользователя."""
        ensure_authorized(admin, Action.VERIFY_USER)

        identity = await self._get_identity(identity_id)
        if identity.is_verified:
            return identity

        updated = await self._store.mark_verified(identity_id)
        await log_info(f"Пользователь {identity_id} подтверждён администратором {admin.id}", type_msg=TypeMsg.INFO)
        await self._publish(EventTypes.IDENTITY_VERIFIED, {"identity_id": identity_id, "admin_id": admin.id})
        return updated

    async def list_offers(self, admin: Identity) -> list[TransportOffer]:
        ensure_authorized(admin, Action.LIST_OFFERS)
        return await self._offers.list_all()

    async def delete_offer(self, admin: Identity, offer_id: str) -> None:
        """
        Удаляет объявление вместе с заявками по нему.

        Raises:
            NotFound: Объявление не найдено
        """
        ensure_authorized(admin, Action.DELETE_OFFER)

        if not await self._offers.delete(offer_id):
            raise NotFound("Offer not found")

        await log_info(f"Объявление {offer_id} удалено администратором {admin.id}", type_msg=TypeMsg.INFO)
        await self._publish(EventTypes.OFFER_DELETED, {"offer_id": offer_id, "admin_id": admin.id})

    async def get_statistics(self, admin: Identity) -> DashboardStatistics:
        ensure_authorized(admin, Action.VIEW_STATISTICS)
        return DashboardStatistics(
            users=await self._store.repository.get_statistics(),
            offers=await self._offers.get_statistics(),
            requests=await self._requests.get_statistics(),
        )
