# transport_connect/core/offers/memory.py
"""Репозиторий объявлений в памяти процесса."""

from __future__ import annotations

from typing import Optional

from transport_connect.core.offers.models import OfferStatistics, TransportOffer
from transport_connect.core.offers.repository import OfferRepository
from transport_connect.infra.memory import InMemoryDatabase


class InMemoryOfferRepository(OfferRepository):

    def __init__(self, storage: InMemoryDatabase) -> None:
        self._storage = storage

    async def get_by_id(self, offer_id: str) -> Optional[TransportOffer]:
        offer = self._storage.offers.get(offer_id)
        return offer.model_copy(deep=True) if offer else None

    async def create(self, offer: TransportOffer) -> TransportOffer:
        self._storage.offers[offer.id] = offer.model_copy(deep=True)
        return offer.model_copy(deep=True)

    async def list_all(self) -> list[TransportOffer]:
        offers = sorted(self._storage.offers.values(), key=lambda o: o.created_at, reverse=True)
        return [o.model_copy(deep=True) for o in offers]

    async def delete(self, offer_id: str) -> bool:
        if offer_id not in self._storage.offers:
            return False
        del self._storage.offers[offer_id]
        # Заявки удаляются вместе с объявлением (ON DELETE CASCADE в БД)
        for request_id in [r.id for r in self._storage.requests.values() if r.offer_id == offer_id]:
            del self._storage.requests[request_id]
        return True

    async def get_statistics(self) -> OfferStatistics:
        offers = list(self._storage.offers.values())
        return OfferStatistics(total=len(offers), active=sum(1 for o in offers if o.is_active))
