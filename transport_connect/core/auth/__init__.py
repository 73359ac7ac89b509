# transport_connect/core/auth/__init__.py
"""Аутентификация и токены сессии."""

from transport_connect.core.auth.service import AuthResult, Authenticator
from transport_connect.core.auth.tokens import TokenClaims, TokenService

__all__ = ["AuthResult", "Authenticator", "TokenClaims", "TokenService"]
