# transport_connect/api/schemas.py
"""
Схемы запросов и ответов HTTP API.

Поля запросов регистрации и входа намеренно не строгие: проверку
выполняет ядро, чтобы ошибки имели единый формат.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from transport_connect.core.admin.service import DashboardStatistics
from transport_connect.core.identity.models import IdentitySummary
from transport_connect.core.offers.models import TransportOffer
from transport_connect.core.transport_requests.models import TransportRequest


# =============================================================================
# ЗАПРОСЫ
# =============================================================================

class RegisterRequest(BaseModel):
    first_name: Optional[Any] = None
    last_name: Optional[Any] = None
    email: Optional[Any] = None
    password: Optional[Any] = Field(None, repr=False)
    role: Optional[Any] = None
    phone: Optional[Any] = None


class LoginRequest(BaseModel):
    email: Optional[Any] = None
    password: Optional[Any] = Field(None, repr=False)


class StatusUpdateRequest(BaseModel):
    status: Any = None


class ActiveStatusRequest(BaseModel):
    is_active: bool


# =============================================================================
# ОТВЕТЫ
# =============================================================================

class SuccessResponse(BaseModel):
    success: bool = True


class AuthResponse(SuccessResponse):
    token: str
    user: IdentitySummary


class UserResponse(SuccessResponse):
    user: IdentitySummary


class OfferResponse(SuccessResponse):
    offer: TransportOffer


class OfferListResponse(SuccessResponse):
    count: int
    offers: list[TransportOffer]


class RequestResponse(SuccessResponse):
    request: TransportRequest


class DashboardResponse(SuccessResponse):
    stats: DashboardStatistics


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
    fields: Optional[dict[str, str]] = None


class HealthStatus(BaseModel):
    service: str
    status: str
    version: str
    dependencies: dict[str, str] = Field(default_factory=dict)
