# transport_connect/core/admin/__init__.py
"""Операции администратора."""

from transport_connect.core.admin.service import AdminService, DashboardStatistics

__all__ = ["AdminService", "DashboardStatistics"]
