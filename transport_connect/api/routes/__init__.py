# transport_connect/api/routes/__init__.py
"""Маршруты HTTP API."""

from transport_connect.api.routes.admin import router as admin_router
from transport_connect.api.routes.auth import router as auth_router
from transport_connect.api.routes.offers import router as offers_router
from transport_connect.api.routes.transport_requests import router as requests_router

__all__ = ["admin_router", "auth_router", "offers_router", "requests_router"]
