# transport_connect/core/transport_requests/models.py
"""
Модели заявок на перевозку груза.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from transport_connect.common.constants import CargoType, RequestStatus
from transport_connect.core.identity.models import utc_now


class CargoDimensions(BaseModel):
    """Габариты груза, см."""

    length: Optional[Decimal] = Field(None, gt=0)
    width: Optional[Decimal] = Field(None, gt=0)
    height: Optional[Decimal] = Field(None, gt=0)


class CargoDetails(BaseModel):
    """Описание груза."""

    type: CargoType = Field(..., description="Тип груза")
    weight_kg: Decimal = Field(..., gt=0, description="Вес, кг")
    dimensions: CargoDimensions = Field(default_factory=CargoDimensions, description="Габариты")
    description: Optional[str] = Field(None, max_length=1000, description="Описание")


class TransportRequest(BaseModel):
    """Заявка отправителя на перевозку по объявлению водителя."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="UUID заявки")
    offer_id: str = Field(..., description="UUID объявления")
    sender_id: int = Field(..., description="ID отправителя")
    # Водитель-владелец объявления на момент создания заявки
    driver_id: int = Field(..., description="ID водителя")

    cargo: CargoDetails = Field(..., description="Груз")
    pickup_location: str = Field(..., description="Адрес забора груза")
    delivery_location: str = Field(..., description="Адрес доставки")

    estimated_price: Decimal = Field(Decimal("0"), ge=0, description="Расчётная стоимость")
    notes: Optional[str] = Field(None, description="Комментарий отправителя")

    status: RequestStatus = Field(RequestStatus.PENDING, description="Статус заявки")
    is_rateable: bool = Field(False, description="Можно ли оценить перевозку")

    created_at: datetime = Field(default_factory=utc_now, description="Время создания")
    updated_at: datetime = Field(default_factory=utc_now, description="Время обновления")


class RequestCreateDTO(BaseModel):
    """DTO для создания заявки."""

    offer_id: str = Field(..., min_length=1)
    cargo: CargoDetails
    pickup_location: str = Field(..., min_length=1, max_length=255)
    delivery_location: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = Field(None, max_length=1000)


class RequestStatistics(BaseModel):
    """Счётчики заявок по статусам."""

    total: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
