# transport_connect/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum
from uuid import UUID


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class UserRole(str, Enum):
    """Роли пользователей (взаимоисключающие, неизменяемые после регистрации)."""
    DRIVER = "driver"
    SENDER = "sender"
    ADMIN = "admin"

    def __str__(self) -> str:
        return self.value


class RequestStatus(str, Enum):
    """Статусы заявки на перевозку."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


class Action(str, Enum):
    """Действия, проверяемые политикой доступа."""
    # Любой аутентифицированный пользователь
    VIEW_SELF = "view_self"

    # Отправитель
    CREATE_REQUEST = "create_request"

    # Водитель
    CREATE_OFFER = "create_offer"

    # Участники заявки (водитель-владелец объявления / отправитель)
    VIEW_REQUEST = "view_request"
    TRANSITION_REQUEST = "transition_request"

    # Администратор
    LIST_OFFERS = "list_offers"
    DELETE_OFFER = "delete_offer"
    SET_USER_ACTIVE = "set_user_active"
    VERIFY_USER = "verify_user"
    VIEW_STATISTICS = "view_statistics"


ADMIN_ACTIONS: frozenset[Action] = frozenset({
    Action.LIST_OFFERS,
    Action.DELETE_OFFER,
    Action.SET_USER_ACTIVE,
    Action.VERIFY_USER,
    Action.VIEW_STATISTICS,
})


class Decision(str, Enum):
    """Результат проверки политики доступа."""
    ALLOW = "allow"
    DENY = "deny"


class VehicleType(str, Enum):
    """Типы транспорта в объявлениях."""
    VAN = "van"
    TRUCK = "truck"
    PICKUP = "pickup"
    CAR = "car"


class CargoType(str, Enum):
    """Типы груза."""
    DOCUMENTS = "documents"
    ELECTRONICS = "electronics"
    FURNITURE = "furniture"
    FOOD = "food"
    CLOTHING = "clothing"
    OTHER = "other"


def is_uuid(value: str) -> bool:
    """Проверяет, что строка является UUID (идентификаторы объявлений и заявок)."""
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True
