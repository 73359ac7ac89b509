# transport_connect/core/access/__init__.py
"""Политика доступа."""

from transport_connect.core.access.policy import RequestParties, authorize, ensure_authorized

__all__ = ["RequestParties", "authorize", "ensure_authorized"]
