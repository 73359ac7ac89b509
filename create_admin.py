#!/usr/bin/env python3
# create_admin.py
"""
Создаёт учётную запись администратора.

Публичная регистрация администраторов не создаёт, поэтому первый
администратор заводится этим скриптом:

    ADMIN_PASSWORD=... python create_admin.py --email admin@transportconnect.com
"""

import argparse
import asyncio
import os
import sys

import pydantic

from transport_connect.common.constants import TypeMsg, UserRole
from transport_connect.common.exceptions import DuplicateIdentity
from transport_connect.common.logger import log_error, log_info, setup_logging
from transport_connect.core.identity.models import RegistrationDTO
from transport_connect.core.identity.repository import PostgresIdentityRepository
from transport_connect.core.identity.store import CredentialStore
from transport_connect.infra.database import close_db, init_db


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Создание администратора TransportConnect")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@transportconnect.com"))
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    parser.add_argument("--phone", default=os.getenv("ADMIN_PHONE", "+10000000000"))
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    password = os.getenv("ADMIN_PASSWORD", "")

    try:
        registration = RegistrationDTO(
            first_name=args.first_name,
            last_name=args.last_name,
            email=args.email,
            password=password,
            role=UserRole.ADMIN,
            phone=args.phone,
        )
    except pydantic.ValidationError as e:
        await log_error(f"Некорректные данные администратора (пароль задаётся в ADMIN_PASSWORD): {e}")
        return 1

    db = await init_db()
    try:
        store = CredentialStore(PostgresIdentityRepository(db))

        existing = await store.find_by_email(registration.email)
        if existing is not None:
            await log_info(f"Пользователь {existing.email} уже существует (роль {existing.role})", type_msg=TypeMsg.WARNING)
            return 0

        try:
            admin = await store.create(registration, is_verified=True)
        except DuplicateIdentity:
            await log_info(f"Пользователь {registration.email} уже существует", type_msg=TypeMsg.WARNING)
            return 0

        # Проверяем, что сохранённый хэш принимает исходный пароль
        stored = await store.find_by_id(admin.id)
        if stored is None or not await store.check_password(stored, password):
            await log_error(f"Администратор {admin.id} создан, но проверка пароля не прошла")
            return 1

        await log_info(f"Администратор {admin.email} создан (id={admin.id})", type_msg=TypeMsg.INFO)
        return 0
    finally:
        await close_db()


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(main()))
