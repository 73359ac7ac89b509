# transport_connect/infra/__init__.py
"""
Инфраструктура: PostgreSQL, RabbitMQ, Redis.
"""
