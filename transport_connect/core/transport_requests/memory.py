# transport_connect/core/transport_requests/memory.py
"""Репозиторий заявок в памяти процесса."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Optional

from transport_connect.common.constants import RequestStatus
from transport_connect.core.transport_requests.models import RequestStatistics, TransportRequest
from transport_connect.core.transport_requests.repository import TransportRequestRepository
from transport_connect.infra.memory import InMemoryDatabase


class InMemoryTransportRequestRepository(TransportRequestRepository):
    """Смена статуса сериализуется блокировкой строки заявки."""

    def __init__(self, storage: InMemoryDatabase) -> None:
        self._storage = storage

    async def get_by_id(self, request_id: str) -> Optional[TransportRequest]:
        request = self._storage.requests.get(request_id)
        return request.model_copy(deep=True) if request else None

    async def create(self, request: TransportRequest) -> TransportRequest:
        self._storage.requests[request.id] = request.model_copy(deep=True)
        return request.model_copy(deep=True)

    async def apply_transition(
        self,
        request_id: str,
        from_status: RequestStatus,
        to_status: RequestStatus,
        at: datetime,
        credit_driver_id: Optional[int] = None,
    ) -> Optional[TransportRequest]:
        async with self._storage.row_lock("requests", request_id):
            current = self._storage.requests.get(request_id)
            if current is None or current.status != from_status:
                return None

            updated = current.model_copy(update={
                "status": to_status,
                "updated_at": at,
                "is_rateable": current.is_rateable or credit_driver_id is not None,
            })
            self._storage.requests[request_id] = updated

            if credit_driver_id is not None:
                driver = self._storage.identities.get(credit_driver_id)
                if driver is not None:
                    self._storage.identities[credit_driver_id] = driver.model_copy(update={
                        "completed_transports": driver.completed_transports + 1,
                        "updated_at": at,
                    })

        return updated.model_copy(deep=True)

    async def get_statistics(self) -> RequestStatistics:
        counts = Counter(r.status.value for r in self._storage.requests.values())
        return RequestStatistics(total=sum(counts.values()), by_status=dict(counts))
