# transport_connect/core/transport_requests/service.py
"""
Движок жизненного цикла заявок.
Создание заявок, чтение и смена статусов по таблице переходов.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional

import pydantic

from transport_connect.common.constants import Action, RequestStatus, TypeMsg, UserRole
from transport_connect.common.exceptions import (
    Forbidden,
    InvalidTransition,
    NotFound,
    ValidationError,
    validation_error_from_pydantic,
)
from transport_connect.common.logger import log_info
from transport_connect.core.access.policy import RequestParties, ensure_authorized
from transport_connect.core.identity.models import Identity, utc_now
from transport_connect.core.offers.repository import OfferRepository
from transport_connect.core.transport_requests.models import RequestCreateDTO, TransportRequest
from transport_connect.core.transport_requests.repository import TransportRequestRepository
from transport_connect.core.transport_requests.state_machine import Party, RequestStateMachine
from transport_connect.infra.event_bus import DomainEvent, EventBus, EventTypes


def _parse_status(value: Any) -> RequestStatus:
    try:
        return RequestStatus(value)
    except ValueError as e:
        allowed = ", ".join(s.value for s in RequestStatus)
        raise ValidationError(
            f"Status must be one of: {allowed}",
            fields={"status": f"Status must be one of: {allowed}"},
        ) from e


def _party_of(actor: Identity, request: TransportRequest) -> Optional[Party]:
    """Сторона заявки, которую представляет пользователь."""
    if actor.role == UserRole.DRIVER and actor.id == request.driver_id:
        return Party.DRIVER
    if actor.role == UserRole.SENDER and actor.id == request.sender_id:
        return Party.SENDER
    return None


class LifecycleEngine:
    """
    Сервис заявок.
    Управляет жизненным циклом заявки от создания до доставки.
    """

    def __init__(
        self,
        requests: TransportRequestRepository,
        offers: OfferRepository,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        """
        Инициализация сервиса.

        Args:
            requests: Репозиторий заявок
            offers: Репозиторий объявлений
            event_bus: Шина событий
        """
        self._requests = requests
        self._offers = offers
        self._event_bus = event_bus

    @property
    def repository(self) -> TransportRequestRepository:
        return self._requests

    async def _publish(self, event_type: str, payload: dict[str, Any]) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(DomainEvent(event_type=event_type, payload=payload))

    # =========================================================================
    # СОЗДАНИЕ И ЧТЕНИЕ
    # =========================================================================

    async def create_request(self, sender: Identity, data: Mapping[str, Any]) -> TransportRequest:
        """
        Создаёт заявку отправителя по активному объявлению.

        Raises:
            Forbidden: Пользователь не отправитель
            ValidationError: Некорректные данные заявки
            NotFound: Объявление не найдено или неактивно
        """
        ensure_authorized(sender, Action.CREATE_REQUEST)

        try:
            dto = RequestCreateDTO.model_validate(dict(data))
        except pydantic.ValidationError as e:
            raise validation_error_from_pydantic(e) from e

        offer = await self._offers.get_by_id(dto.offer_id)
        if offer is None or not offer.is_active:
            raise NotFound("Offer not found or no longer active")

        estimated_price = (dto.cargo.weight_kg * offer.price_per_kg).quantize(Decimal("0.01"))

        request = await self._requests.create(TransportRequest(
            offer_id=offer.id,
            sender_id=sender.id,
            driver_id=offer.driver_id,
            cargo=dto.cargo,
            pickup_location=dto.pickup_location,
            delivery_location=dto.delivery_location,
            estimated_price=estimated_price,
            notes=dto.notes,
        ))

        await log_info(
            f"Отправитель {sender.id} создал заявку {request.id} по объявлению {offer.id}",
            type_msg=TypeMsg.INFO,
        )
        await self._publish(EventTypes.REQUEST_CREATED, {
            "request_id": request.id,
            "offer_id": offer.id,
            "sender_id": sender.id,
            "driver_id": offer.driver_id,
        })
        return request

    async def get_request(self, actor: Identity, request_id: str) -> TransportRequest:
        """
        Возвращает заявку участнику или администратору.

        Raises:
            NotFound: Заявка не найдена
            Forbidden: Пользователь не участник заявки
        """
        request = await self._requests.get_by_id(request_id)
        if request is None:
            raise NotFound("Transport request not found")

        ensure_authorized(
            actor,
            Action.VIEW_REQUEST,
            RequestParties(driver_id=request.driver_id, sender_id=request.sender_id),
        )
        return request

    # =========================================================================
    # СМЕНА СТАТУСА
    # =========================================================================

    async def transition(self, request_id: str, actor: Identity, target: Any) -> TransportRequest:
        """
        Переводит заявку в новый статус.

        Повторный перевод в текущий статус той же стороной ничего не
        меняет и возвращает заявку как есть.

        Raises:
            ValidationError: Неизвестный статус
            NotFound: Заявка не найдена
            Forbidden: Пользователь не участник заявки или переход выполняет другая сторона
            InvalidTransition: Перехода нет в таблице или статус уже изменил другой запрос
        """
        target_status = _parse_status(target)

        request = await self._requests.get_by_id(request_id)
        if request is None:
            raise NotFound("Transport request not found")

        ensure_authorized(
            actor,
            Action.TRANSITION_REQUEST,
            RequestParties(driver_id=request.driver_id, sender_id=request.sender_id),
        )
        party = _party_of(actor, request)
        current = request.status

        if target_status == current:
            if RequestStateMachine.TRIGGERED_BY[current] != party:
                raise Forbidden()
            return request

        required_party = RequestStateMachine.party_for(current, target_status)
        if required_party is None:
            raise InvalidTransition(f"Cannot change status from {current} to {target_status}")
        if required_party != party:
            raise Forbidden(f"Only the {required_party.value} can change status to {target_status}")

        delivered = target_status == RequestStatus.DELIVERED
        updated = await self._requests.apply_transition(
            request.id,
            current,
            target_status,
            utc_now(),
            credit_driver_id=request.driver_id if delivered else None,
        )
        if updated is None:
            await log_info(
                f"Конфликт смены статуса заявки {request.id}: {current} → {target_status}",
                type_msg=TypeMsg.WARNING,
            )
            raise InvalidTransition("Request status was changed concurrently, reload and retry")

        await log_info(
            f"Заявка {request.id}: {current} → {target_status} (пользователь {actor.id})",
            type_msg=TypeMsg.INFO,
        )
        await self._publish(EventTypes.REQUEST_STATUS_CHANGED, {
            "request_id": updated.id,
            "old_status": current.value,
            "new_status": target_status.value,
            "actor_id": actor.id,
        })
        if delivered:
            await self._publish(EventTypes.REQUEST_RATING_UNLOCKED, {
                "request_id": updated.id,
                "driver_id": updated.driver_id,
                "sender_id": updated.sender_id,
            })
        return updated
