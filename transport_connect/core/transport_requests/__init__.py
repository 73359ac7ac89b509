# transport_connect/core/transport_requests/__init__.py
"""Заявки на перевозку и их жизненный цикл."""

from transport_connect.core.transport_requests.models import TransportRequest
from transport_connect.core.transport_requests.service import LifecycleEngine
from transport_connect.core.transport_requests.state_machine import Party, RequestStateMachine

__all__ = ["LifecycleEngine", "Party", "RequestStateMachine", "TransportRequest"]
