# transport_connect/core/transport_requests/state_machine.py
"""
State machine статусов заявки.

Допустимые переходы:
- pending → accepted, rejected (водитель)
- pending → cancelled (отправитель)
- accepted → in_transit (водитель)
- accepted → cancelled (отправитель)
- in_transit → delivered (водитель)
- rejected, delivered, cancelled: терминальные
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from transport_connect.common.constants import RequestStatus


class Party(str, Enum):
    """Сторона заявки, выполняющая переход."""
    DRIVER = "driver"
    SENDER = "sender"


class RequestStateMachine:
    """Таблица переходов: (из, в) -> сторона, которая может выполнить переход."""

    ALLOWED_TRANSITIONS: dict[RequestStatus, dict[RequestStatus, Party]] = {
        RequestStatus.PENDING: {
            RequestStatus.ACCEPTED: Party.DRIVER,
            RequestStatus.REJECTED: Party.DRIVER,
            RequestStatus.CANCELLED: Party.SENDER,
        },
        RequestStatus.ACCEPTED: {
            RequestStatus.IN_TRANSIT: Party.DRIVER,
            RequestStatus.CANCELLED: Party.SENDER,
        },
        RequestStatus.IN_TRANSIT: {
            RequestStatus.DELIVERED: Party.DRIVER,
        },
        RequestStatus.REJECTED: {},
        RequestStatus.DELIVERED: {},
        RequestStatus.CANCELLED: {},
    }

    # Кто переводит заявку в каждый статус (pending создаёт отправитель)
    TRIGGERED_BY: dict[RequestStatus, Party] = {
        RequestStatus.PENDING: Party.SENDER,
        RequestStatus.ACCEPTED: Party.DRIVER,
        RequestStatus.REJECTED: Party.DRIVER,
        RequestStatus.IN_TRANSIT: Party.DRIVER,
        RequestStatus.DELIVERED: Party.DRIVER,
        RequestStatus.CANCELLED: Party.SENDER,
    }

    @classmethod
    def can_transition(cls, from_status: RequestStatus, to_status: RequestStatus) -> bool:
        """Проверяет, есть ли ребро в таблице."""
        return to_status in cls.ALLOWED_TRANSITIONS.get(from_status, {})

    @classmethod
    def party_for(cls, from_status: RequestStatus, to_status: RequestStatus) -> Optional[Party]:
        """Сторона, которой разрешён переход, или None, если перехода нет."""
        return cls.ALLOWED_TRANSITIONS.get(from_status, {}).get(to_status)

    @classmethod
    def next_statuses(cls, status: RequestStatus) -> list[RequestStatus]:
        return list(cls.ALLOWED_TRANSITIONS.get(status, {}))

    @classmethod
    def is_terminal(cls, status: RequestStatus) -> bool:
        return not cls.ALLOWED_TRANSITIONS.get(status)
