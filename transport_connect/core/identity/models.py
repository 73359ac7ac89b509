# transport_connect/core/identity/models.py
"""
Модели данных пользователей (водители, отправители, администраторы).
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from transport_connect.common.constants import UserRole


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
PHONE_RE = re.compile(r"^\+?[0-9][0-9\s\-()]{5,19}$")

PASSWORD_MIN_LENGTH = 6
# bcrypt учитывает только первые 72 байта пароля
PASSWORD_MAX_BYTES = 72


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """Email хранится и сравнивается в нижнем регистре без пробелов по краям."""
    return email.strip().lower()


class Rating(BaseModel):
    """Агрегированный рейтинг."""

    average: float = Field(0.0, ge=0.0, le=5.0, description="Средняя оценка")
    count: int = Field(0, ge=0, description="Количество оценок")


class Identity(BaseModel):
    """
    Учётная запись пользователя.

    ``password_hash`` исключён из сериализации и repr: наружу из хранилища
    учётных данных уходит только ``IdentitySummary``.
    """

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    id: int = Field(..., description="ID пользователя")
    first_name: str = Field(..., description="Имя")
    last_name: str = Field(..., description="Фамилия")
    email: str = Field(..., description="Email в нижнем регистре")
    password_hash: str = Field(..., exclude=True, repr=False, description="bcrypt-хэш пароля")
    role: UserRole = Field(..., description="Роль пользователя")
    phone: str = Field(..., description="Номер телефона")

    is_verified: bool = Field(False, description="Подтверждён ли администратором")
    is_active: bool = Field(True, description="Активна ли учётная запись")

    rating: Rating = Field(default_factory=Rating, description="Рейтинг")
    completed_transports: int = Field(0, ge=0, description="Завершённых перевозок")

    created_at: datetime = Field(default_factory=utc_now, description="Дата регистрации")
    updated_at: datetime = Field(default_factory=utc_now, description="Дата обновления")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def summary(self) -> IdentitySummary:
        """Публичное представление без хэша пароля."""
        return IdentitySummary.model_validate(self.model_dump())


class IdentitySummary(BaseModel):
    """Публичные данные пользователя (ответы API, /me)."""

    id: int
    first_name: str
    last_name: str
    email: str
    role: UserRole
    phone: str
    is_verified: bool
    is_active: bool
    rating: Rating
    completed_transports: int
    created_at: datetime


class RegistrationDTO(BaseModel):
    """DTO регистрации. Пароль здесь в открытом виде и дальше хранилища не уходит."""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., max_length=254)
    password: str = Field(..., repr=False)
    role: UserRole
    phone: str

    @field_validator("first_name", "last_name", "phone", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        email = normalize_email(v)
        if not EMAIL_RE.match(email):
            raise ValueError("Please provide a valid email")
        return email

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        return v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not PHONE_RE.match(v):
            raise ValueError("Please provide a valid phone number")
        return v


class IdentityCreateDTO(BaseModel):
    """DTO для записи нового пользователя в репозиторий (пароль уже хэширован)."""

    first_name: str
    last_name: str
    email: str
    password_hash: str = Field(..., repr=False)
    role: UserRole
    phone: str
    is_verified: bool = False
    is_active: bool = True


class IdentityStatistics(BaseModel):
    """Счётчики пользователей для панели администратора."""

    total: int = 0
    drivers: int = 0
    senders: int = 0
    admins: int = 0
    active: int = 0
    verified: int = 0

    @classmethod
    def from_identities(cls, identities: list[Identity]) -> IdentityStatistics:
        return cls(
            total=len(identities),
            drivers=sum(1 for i in identities if i.role == UserRole.DRIVER),
            senders=sum(1 for i in identities if i.role == UserRole.SENDER),
            admins=sum(1 for i in identities if i.role == UserRole.ADMIN),
            active=sum(1 for i in identities if i.is_active),
            verified=sum(1 for i in identities if i.is_verified),
        )
