# transport_connect/core/access/policy.py
"""
Политика доступа: роль + действие (+ ресурс) -> решение.

Чистые функции без побочных эффектов. Проверка выполняется после
валидации токена и до обращения к движку заявок.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from transport_connect.common.constants import ADMIN_ACTIONS, Action, Decision, UserRole
from transport_connect.common.exceptions import Forbidden
from transport_connect.core.identity.models import Identity


@dataclass(frozen=True)
class RequestParties:
    """Участники заявки: водитель-владелец объявления и отправитель."""
    driver_id: int
    sender_id: int


def authorize(identity: Identity, action: Action, resource: Optional[RequestParties] = None) -> Decision:
    """
    Решает, может ли пользователь выполнить действие.

    Для действий над заявкой (VIEW_REQUEST, TRANSITION_REQUEST) нужен
    resource с участниками заявки.
    """
    if action == Action.VIEW_SELF:
        return Decision.ALLOW

    match identity.role:
        case UserRole.ADMIN:
            allowed = action in ADMIN_ACTIONS or action == Action.VIEW_REQUEST
        case UserRole.DRIVER:
            allowed = action == Action.CREATE_OFFER or (
                action in (Action.VIEW_REQUEST, Action.TRANSITION_REQUEST)
                and resource is not None
                and resource.driver_id == identity.id
            )
        case UserRole.SENDER:
            allowed = action == Action.CREATE_REQUEST or (
                action in (Action.VIEW_REQUEST, Action.TRANSITION_REQUEST)
                and resource is not None
                and resource.sender_id == identity.id
            )
        case _:
            allowed = False

    return Decision.ALLOW if allowed else Decision.DENY


def ensure_authorized(identity: Identity, action: Action, resource: Optional[RequestParties] = None) -> None:
    """
    Raises:
        Forbidden: Политика запрещает действие
    """
    if authorize(identity, action, resource) is Decision.DENY:
        raise Forbidden()
