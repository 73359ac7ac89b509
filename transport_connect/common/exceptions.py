# transport_connect/common/exceptions.py
"""
Иерархия ошибок ядра.

Каждая ошибка несёт стабильный ``kind`` и человекочитаемое сообщение.
HTTP-слой сопоставляет ``kind`` со статус-кодом, ядро о HTTP ничего не знает.
"""

from __future__ import annotations

from typing import Any


class CoreError(Exception):
    """Базовая ошибка ядра."""

    kind: str = "core_error"
    default_message: str = "Ошибка обработки запроса"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        """Тело ответа для внешнего слоя."""
        return {"success": False, "error": self.kind, "message": self.message}


class ValidationError(CoreError):
    """Некорректные входные данные. Клиент должен исправить их и повторить."""
    kind = "validation_error"
    default_message = "Invalid input"

    def __init__(self, message: str | None = None, fields: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or {}

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        if self.fields:
            data["fields"] = self.fields
        return data


class DuplicateIdentity(CoreError):
    """Email уже зарегистрирован."""
    kind = "duplicate_identity"
    default_message = "User already exists with this email"


class InvalidCredentials(CoreError):
    """
    Неизвестный email или неверный пароль.
    Сообщение одинаково для обоих случаев.
    """
    kind = "invalid_credentials"
    default_message = "Invalid credentials"


class AccountInactive(CoreError):
    """Учётная запись деактивирована администратором."""
    kind = "account_inactive"
    default_message = "Account is inactive"


class InvalidToken(CoreError):
    """Подпись токена неверна, токен просрочен или отозван."""
    kind = "invalid_token"
    default_message = "Invalid or expired token"


class IdentityNotFound(CoreError):
    """Субъект токена больше не существует."""
    kind = "identity_not_found"
    default_message = "User no longer exists"


class Forbidden(CoreError):
    """У вызывающего нет прав на действие."""
    kind = "forbidden"
    default_message = "Not authorized to perform this action"


class NotFound(CoreError):
    """Ресурс не найден."""
    kind = "not_found"
    default_message = "Resource not found"


class InvalidTransition(CoreError):
    """Недопустимая смена статуса. Клиент должен перечитать текущее состояние."""
    kind = "invalid_transition"
    default_message = "Invalid status transition"


class InternalFailure(CoreError):
    """Операционная ошибка (БД, криптография), а не ошибка пользователя."""
    kind = "internal_failure"
    default_message = "Internal server error"


def validation_error_from_pydantic(exc: Any) -> ValidationError:
    """Переводит pydantic.ValidationError в ValidationError ядра (поле -> сообщение)."""
    fields: dict[str, str] = {}
    for error in exc.errors():
        name = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        fields.setdefault(name, message)

    first = next(iter(fields.values()), ValidationError.default_message)
    return ValidationError(first, fields=fields)
