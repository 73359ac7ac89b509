#!/usr/bin/env python3
# entrypoint_api.py
"""
Точка входа для HTTP API.
Порт: API_PORT (по умолчанию 5000)
"""

import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

import uvicorn

from transport_connect.common.constants import TypeMsg
from transport_connect.common.logger import log_info, setup_logging
from transport_connect.config import settings


async def main() -> None:
    """Запуск TransportConnect API."""
    setup_logging()
    await log_info(
        f"Запуск TransportConnect API на {settings.api.API_HOST}:{settings.api.API_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "transport_connect.api.app:get_app",
        factory=True,
        host=settings.api.API_HOST,
        port=settings.api.API_PORT,
        reload=False,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
