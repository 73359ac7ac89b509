# transport_connect/common/__init__.py
"""
Общие утилиты, константы, ошибки и логгер.
"""

from transport_connect.common.logger import get_logger, log_info, log_error, log_warning, log_debug
from transport_connect.common.constants import TypeMsg

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "TypeMsg",
]
