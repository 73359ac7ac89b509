# transport_connect/core/__init__.py
"""
Бизнес-логика: хранилище учётных данных, аутентификация, политика доступа,
объявления, жизненный цикл заявок, администрирование.
"""
