# transport_connect/core/identity/__init__.py
"""Пользователи и хранилище учётных данных."""

from transport_connect.core.identity.models import (
    Identity,
    IdentitySummary,
    Rating,
    RegistrationDTO,
)
from transport_connect.core.identity.store import CredentialStore

__all__ = [
    "CredentialStore",
    "Identity",
    "IdentitySummary",
    "Rating",
    "RegistrationDTO",
]
