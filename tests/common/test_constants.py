# tests/common/test_constants.py
"""
Тесты для модуля констант.
"""

import pytest

from transport_connect.common.constants import (
    ADMIN_ACTIONS,
    Action,
    RequestStatus,
    TypeMsg,
    UserRole,
    is_uuid,
)


class TestTypeMsg:
    """Тесты для enum TypeMsg."""

    def test_type_msg_values(self) -> None:
        assert TypeMsg.DEBUG.value == "debug"
        assert TypeMsg.CRITICAL.value == "critical"

    def test_type_msg_is_str_enum(self) -> None:
        assert isinstance(TypeMsg.DEBUG, str)
        assert TypeMsg.INFO == "info"


class TestUserRole:
    """Тесты для enum UserRole."""

    def test_roles(self) -> None:
        assert {role.value for role in UserRole} == {"driver", "sender", "admin"}

    def test_str(self) -> None:
        assert str(UserRole.DRIVER) == "driver"
        assert f"{UserRole.ADMIN}" == "admin"

    def test_from_value(self) -> None:
        assert UserRole("sender") is UserRole.SENDER


class TestRequestStatus:
    """Тесты для enum RequestStatus."""

    def test_statuses(self) -> None:
        assert [status.value for status in RequestStatus] == [
            "pending", "accepted", "rejected", "in_transit", "delivered", "cancelled",
        ]

    def test_unknown_status(self) -> None:
        with pytest.raises(ValueError):
            RequestStatus("lost")


class TestAdminActions:

    def test_admin_actions_exclude_participant_actions(self) -> None:
        assert Action.TRANSITION_REQUEST not in ADMIN_ACTIONS
        assert Action.CREATE_OFFER not in ADMIN_ACTIONS
        assert Action.DELETE_OFFER in ADMIN_ACTIONS


class TestIsUuid:

    @pytest.mark.parametrize("value,expected", [
        ("6f1c3a52-2b9e-4d8e-9a51-3e2f0c7b1d44", True),
        ("6F1C3A52-2B9E-4D8E-9A51-3E2F0C7B1D44", True),
        ("not-a-uuid", False),
        ("", False),
        ("123", False),
    ])
    def test_is_uuid(self, value: str, expected: bool) -> None:
        assert is_uuid(value) is expected
