# tests/core/test_request_state_machine.py
"""
Тесты для таблицы переходов статусов заявки.
"""

from __future__ import annotations

import pytest

from transport_connect.common.constants import RequestStatus
from transport_connect.core.transport_requests.state_machine import Party, RequestStateMachine

EDGES = {
    (RequestStatus.PENDING, RequestStatus.ACCEPTED): Party.DRIVER,
    (RequestStatus.PENDING, RequestStatus.REJECTED): Party.DRIVER,
    (RequestStatus.PENDING, RequestStatus.CANCELLED): Party.SENDER,
    (RequestStatus.ACCEPTED, RequestStatus.IN_TRANSIT): Party.DRIVER,
    (RequestStatus.ACCEPTED, RequestStatus.CANCELLED): Party.SENDER,
    (RequestStatus.IN_TRANSIT, RequestStatus.DELIVERED): Party.DRIVER,
}


class TestRequestStateMachine:
    """Тесты для RequestStateMachine."""

    def test_table_covers_every_status(self) -> None:
        assert set(RequestStateMachine.ALLOWED_TRANSITIONS) == set(RequestStatus)
        assert set(RequestStateMachine.TRIGGERED_BY) == set(RequestStatus)

    @pytest.mark.parametrize("source", list(RequestStatus))
    @pytest.mark.parametrize("target", list(RequestStatus))
    def test_edges(self, source: RequestStatus, target: RequestStatus) -> None:
        expected = EDGES.get((source, target))

        assert RequestStateMachine.party_for(source, target) == expected
        assert RequestStateMachine.can_transition(source, target) is (expected is not None)

    @pytest.mark.parametrize("status", [RequestStatus.REJECTED, RequestStatus.DELIVERED, RequestStatus.CANCELLED])
    def test_terminal_statuses(self, status: RequestStatus) -> None:
        assert RequestStateMachine.is_terminal(status)
        assert RequestStateMachine.next_statuses(status) == []

    def test_cancel_not_reachable_from_in_transit(self) -> None:
        assert not RequestStateMachine.can_transition(RequestStatus.IN_TRANSIT, RequestStatus.CANCELLED)

    def test_trigger_party_matches_incoming_edges(self) -> None:
        for (_, target), party in EDGES.items():
            assert RequestStateMachine.TRIGGERED_BY[target] == party
