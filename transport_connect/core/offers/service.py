# transport_connect/core/offers/service.py
"""
Сервис объявлений водителей.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import pydantic

from transport_connect.common.constants import Action, TypeMsg
from transport_connect.common.exceptions import NotFound, validation_error_from_pydantic
from transport_connect.common.logger import log_info
from transport_connect.core.access.policy import ensure_authorized
from transport_connect.core.identity.models import Identity
from transport_connect.core.offers.models import OfferCreateDTO, TransportOffer
from transport_connect.core.offers.repository import OfferRepository
from transport_connect.infra.event_bus import DomainEvent, EventBus, EventTypes


class OfferService:
    """Создание и чтение объявлений."""

    def __init__(self, repo: OfferRepository, event_bus: Optional[EventBus] = None) -> None:
        self._repo = repo
        self._event_bus = event_bus

    @property
    def repository(self) -> OfferRepository:
        return self._repo

    async def create_offer(self, driver: Identity, data: Mapping[str, Any]) -> TransportOffer:
        """
        Создаёт объявление от имени водителя.

        Raises:
            Forbidden: Пользователь не водитель
            ValidationError: Некорректные данные объявления
        """
        ensure_authorized(driver, Action.CREATE_OFFER)

        try:
            dto = OfferCreateDTO.model_validate(dict(data))
        except pydantic.ValidationError as e:
            raise validation_error_from_pydantic(e) from e

        offer = await self._repo.create(TransportOffer(driver_id=driver.id, **dto.model_dump()))
        await log_info(
            f"Водитель {driver.id} создал объявление {offer.id}: "
            f"{offer.departure_city} → {offer.destination_city}",
            type_msg=TypeMsg.INFO,
        )

        if self._event_bus is not None:
            await self._event_bus.publish(DomainEvent(
                event_type=EventTypes.OFFER_CREATED,
                payload={"offer_id": offer.id, "driver_id": driver.id},
            ))
        return offer

    async def get_offer(self, offer_id: str) -> TransportOffer:
        offer = await self._repo.get_by_id(offer_id)
        if offer is None:
            raise NotFound("Offer not found")
        return offer
