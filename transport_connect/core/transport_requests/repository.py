# transport_connect/core/transport_requests/repository.py
"""
Репозиторий заявок на перевозку.

Смена статуса выполняется как compare-and-set: запись проходит,
только если статус в хранилище всё ещё равен прочитанному.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from transport_connect.common.constants import CargoType, RequestStatus, TypeMsg, is_uuid
from transport_connect.common.logger import log_info
from transport_connect.core.transport_requests.models import (
    CargoDetails,
    CargoDimensions,
    RequestStatistics,
    TransportRequest,
)
from transport_connect.infra.database import DatabaseManager, db_operation


_REQUEST_COLUMNS = """
    id, offer_id, sender_id, driver_id,
    cargo_type, cargo_weight_kg, cargo_length, cargo_width, cargo_height, cargo_description,
    pickup_location, delivery_location, estimated_price, notes,
    status, is_rateable, created_at, updated_at
"""


def row_to_request(row: Any) -> TransportRequest:
    return TransportRequest(
        id=str(row["id"]),
        offer_id=str(row["offer_id"]),
        sender_id=row["sender_id"],
        driver_id=row["driver_id"],
        cargo=CargoDetails(
            type=CargoType(row["cargo_type"]),
            weight_kg=row["cargo_weight_kg"],
            dimensions=CargoDimensions(
                length=row["cargo_length"],
                width=row["cargo_width"],
                height=row["cargo_height"],
            ),
            description=row["cargo_description"],
        ),
        pickup_location=row["pickup_location"],
        delivery_location=row["delivery_location"],
        estimated_price=row["estimated_price"],
        notes=row["notes"],
        status=RequestStatus(row["status"]),
        is_rateable=row["is_rateable"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class TransportRequestRepository(ABC):
    """Контракт хранилища заявок."""

    @abstractmethod
    async def get_by_id(self, request_id: str) -> Optional[TransportRequest]:
        ...

    @abstractmethod
    async def create(self, request: TransportRequest) -> TransportRequest:
        ...

    @abstractmethod
    async def apply_transition(
        self,
        request_id: str,
        from_status: RequestStatus,
        to_status: RequestStatus,
        at: datetime,
        credit_driver_id: Optional[int] = None,
    ) -> Optional[TransportRequest]:
        """
        Атомарно меняет статус, если текущий статус равен from_status.

        Если передан credit_driver_id, в той же операции увеличивает
        счётчик завершённых перевозок водителя и открывает оценку заявки.

        Returns:
            Обновлённая заявка или None, если статус уже изменил другой запрос
        """
        ...

    @abstractmethod
    async def get_statistics(self) -> RequestStatistics:
        ...


class PostgresTransportRequestRepository(TransportRequestRepository):
    """Репозиторий заявок в PostgreSQL."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, request_id: str) -> Optional[TransportRequest]:
        if not is_uuid(request_id):
            return None
        async with db_operation(f"чтение заявки {request_id}"):
            row = await self._db.fetchrow(
                f"SELECT {_REQUEST_COLUMNS} FROM transport_requests WHERE id = $1::uuid",
                request_id,
            )
        return row_to_request(row) if row else None

    async def create(self, request: TransportRequest) -> TransportRequest:
        cargo = request.cargo
        async with db_operation("создание заявки"):
            row = await self._db.fetchrow(
                f"""
                INSERT INTO transport_requests (
                    id, offer_id, sender_id, driver_id,
                    cargo_type, cargo_weight_kg, cargo_length, cargo_width, cargo_height,
                    cargo_description, pickup_location, delivery_location,
                    estimated_price, notes, status, is_rateable, created_at, updated_at
                )
                VALUES ($1::uuid, $2::uuid, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12,
                        $13, $14, $15, $16, $17, $18)
                RETURNING {_REQUEST_COLUMNS}
                """,
                request.id,
                request.offer_id,
                request.sender_id,
                request.driver_id,
                cargo.type.value,
                cargo.weight_kg,
                cargo.dimensions.length,
                cargo.dimensions.width,
                cargo.dimensions.height,
                cargo.description,
                request.pickup_location,
                request.delivery_location,
                request.estimated_price,
                request.notes,
                request.status.value,
                request.is_rateable,
                request.created_at,
                request.updated_at,
            )
        await log_info(f"Заявка {request.id} создана", type_msg=TypeMsg.DEBUG)
        return row_to_request(row)

    async def apply_transition(
        self,
        request_id: str,
        from_status: RequestStatus,
        to_status: RequestStatus,
        at: datetime,
        credit_driver_id: Optional[int] = None,
    ) -> Optional[TransportRequest]:
        async with db_operation(f"смена статуса заявки {request_id}"):
            async with self._db.transaction() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE transport_requests
                    SET status = $3, updated_at = $4, is_rateable = is_rateable OR $5
                    WHERE id = $1::uuid AND status = $2
                    RETURNING {_REQUEST_COLUMNS}
                    """,
                    request_id,
                    from_status.value,
                    to_status.value,
                    at,
                    credit_driver_id is not None,
                )
                if row is None:
                    return None

                if credit_driver_id is not None:
                    await conn.execute(
                        """
                        UPDATE identities
                        SET completed_transports = completed_transports + 1, updated_at = $2
                        WHERE id = $1
                        """,
                        credit_driver_id,
                        at,
                    )

        return row_to_request(row)

    async def get_statistics(self) -> RequestStatistics:
        async with db_operation("статистика заявок"):
            rows = await self._db.fetch(
                "SELECT status, COUNT(*) AS count FROM transport_requests GROUP BY status"
            )
        by_status = {row["status"]: row["count"] for row in rows}
        return RequestStatistics(total=sum(by_status.values()), by_status=by_status)
