# transport_connect/core/offers/models.py
"""
Модели объявлений водителей о перевозке.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from transport_connect.common.constants import VehicleType
from transport_connect.core.identity.models import utc_now


class TransportOffer(BaseModel):
    """Объявление водителя о рейсе."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="UUID объявления")
    driver_id: int = Field(..., description="ID водителя-владельца")

    departure_city: str = Field(..., description="Город отправления")
    destination_city: str = Field(..., description="Город назначения")
    departure_date: date = Field(..., description="Дата отправления")

    vehicle_type: VehicleType = Field(..., description="Тип транспорта")
    capacity_kg: Decimal = Field(..., gt=0, description="Максимальный вес груза, кг")
    price_per_kg: Decimal = Field(..., ge=0, description="Цена за кг")
    description: Optional[str] = Field(None, description="Описание")

    is_active: bool = Field(True, description="Принимает ли заявки")

    created_at: datetime = Field(default_factory=utc_now, description="Время создания")
    updated_at: datetime = Field(default_factory=utc_now, description="Время обновления")


class OfferCreateDTO(BaseModel):
    """DTO для создания объявления."""

    departure_city: str = Field(..., min_length=1, max_length=100)
    destination_city: str = Field(..., min_length=1, max_length=100)
    departure_date: date
    vehicle_type: VehicleType
    capacity_kg: Decimal = Field(..., gt=0)
    price_per_kg: Decimal = Field(..., ge=0)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("departure_city", "destination_city", mode="before")
    @classmethod
    def strip_city(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v


class OfferStatistics(BaseModel):
    """Счётчики объявлений."""

    total: int = 0
    active: int = 0
