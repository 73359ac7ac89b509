# transport_connect/core/offers/repository.py
"""
Репозиторий объявлений.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from transport_connect.common.constants import TypeMsg, VehicleType, is_uuid
from transport_connect.common.logger import log_info
from transport_connect.core.offers.models import OfferStatistics, TransportOffer
from transport_connect.infra.database import DatabaseManager, db_operation


_OFFER_COLUMNS = """
    id, driver_id, departure_city, destination_city, departure_date,
    vehicle_type, capacity_kg, price_per_kg, description, is_active,
    created_at, updated_at
"""


def row_to_offer(row: Any) -> TransportOffer:
    return TransportOffer(
        id=str(row["id"]),
        driver_id=row["driver_id"],
        departure_city=row["departure_city"],
        destination_city=row["destination_city"],
        departure_date=row["departure_date"],
        vehicle_type=VehicleType(row["vehicle_type"]),
        capacity_kg=row["capacity_kg"],
        price_per_kg=row["price_per_kg"],
        description=row["description"],
        is_active=row["is_active"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class OfferRepository(ABC):
    """Контракт хранилища объявлений."""

    @abstractmethod
    async def get_by_id(self, offer_id: str) -> Optional[TransportOffer]:
        ...

    @abstractmethod
    async def create(self, offer: TransportOffer) -> TransportOffer:
        ...

    @abstractmethod
    async def list_all(self) -> list[TransportOffer]:
        ...

    @abstractmethod
    async def delete(self, offer_id: str) -> bool:
        """Удаляет объявление. False, если его не было."""
        ...

    @abstractmethod
    async def get_statistics(self) -> OfferStatistics:
        ...


class PostgresOfferRepository(OfferRepository):
    """Репозиторий объявлений в PostgreSQL."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, offer_id: str) -> Optional[TransportOffer]:
        if not is_uuid(offer_id):
            return None
        async with db_operation(f"чтение объявления {offer_id}"):
            row = await self._db.fetchrow(
                f"SELECT {_OFFER_COLUMNS} FROM transport_offers WHERE id = $1::uuid",
                offer_id,
            )
        return row_to_offer(row) if row else None

    async def create(self, offer: TransportOffer) -> TransportOffer:
        async with db_operation("создание объявления"):
            row = await self._db.fetchrow(
                f"""
                INSERT INTO transport_offers (id, driver_id, departure_city, destination_city,
                                              departure_date, vehicle_type, capacity_kg,
                                              price_per_kg, description, is_active,
                                              created_at, updated_at)
                VALUES ($1::uuid, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
                RETURNING {_OFFER_COLUMNS}
                """,
                offer.id,
                offer.driver_id,
                offer.departure_city,
                offer.destination_city,
                offer.departure_date,
                offer.vehicle_type.value,
                offer.capacity_kg,
                offer.price_per_kg,
                offer.description,
                offer.is_active,
                offer.created_at,
                offer.updated_at,
            )
        await log_info(f"Объявление {offer.id} создано", type_msg=TypeMsg.DEBUG)
        return row_to_offer(row)

    async def list_all(self) -> list[TransportOffer]:
        async with db_operation("список объявлений"):
            rows = await self._db.fetch(
                f"SELECT {_OFFER_COLUMNS} FROM transport_offers ORDER BY created_at DESC"
            )
        return [row_to_offer(row) for row in rows]

    async def delete(self, offer_id: str) -> bool:
        if not is_uuid(offer_id):
            return False
        async with db_operation(f"удаление объявления {offer_id}"):
            status = await self._db.execute(
                "DELETE FROM transport_offers WHERE id = $1::uuid",
                offer_id,
            )
        # Статус asyncpg: "DELETE <count>"
        return status.split()[-1] != "0"

    async def get_statistics(self) -> OfferStatistics:
        async with db_operation("статистика объявлений"):
            row = await self._db.fetchrow(
                """
                SELECT COUNT(*) AS total,
                       COUNT(*) FILTER (WHERE is_active) AS active
                FROM transport_offers
                """
            )
        return OfferStatistics(**dict(row))
