#!/usr/bin/env python3
"""
Скрипт для создания администратора в базе данных.

Пример:
    python scripts/create_admin.py --username admin --email admin@example.com
Пароль берется из переменной ADMIN_PASSWORD или запрашивается в консоли.
"""

import argparse
import getpass
import os
import sys

from sqlalchemy import or_, select

from storefront.core.auth import AuthService
from storefront.db.database import SessionLocal
from storefront.db.models.user import User


def create_admin(username: str, email: str, password: str, full_name: str = None) -> bool:
    """Создает администратора или повышает существующего пользователя до admin."""
    print("🔑 Создание администратора...")
    print("=" * 50)

    with SessionLocal() as db:
        user = db.scalar(
            select(User).where(or_(User.username == username, User.email == email))
        )

        if user:
            print(f"✅ Пользователь уже существует: {user.username} ({user.email})")
            user.role = "admin"
            user.is_active = True
            user.hashed_password = AuthService.get_password_hash(password)
            print("✅ Роль обновлена на admin, пароль изменен")
        else:
            user = User(
                username=username,
                email=email,
                hashed_password=AuthService.get_password_hash(password),
                full_name=full_name,
                role="admin",
                is_active=True,
            )
            db.add(user)
            print(f"📝 Создан администратор: {username} ({email})")

        db.commit()

    print("=" * 50)
    print("🎉 Администратор готов к использованию!")
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(description="Создать администратора витрины")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--email", required=True)
    parser.add_argument("--full-name", default=None)
    args = parser.parse_args(argv)

    password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Пароль: ")
    if not password:
        print("❌ Пароль не может быть пустым")
        return 1

    try:
        create_admin(args.username, args.email, password, args.full_name)
    except Exception as e:
        print(f"❌ Ошибка при создании администратора: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
