#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных
"""

import sys

from sqlalchemy import inspect

from storefront.db.database import engine, init_models


def init_database():
    """Создает все таблицы в базе данных."""
    print("🗄️ Инициализация базы данных...")

    try:
        init_models(engine)
    except Exception as e:
        print(f"❌ Ошибка создания таблиц: {e}")
        return False

    print("✅ Все таблицы созданы успешно!")
    tables = inspect(engine).get_table_names()
    print(f"📋 Таблиц в базе: {len(tables)}")
    for table in tables:
        print(f"  - {table}")
    return True


if __name__ == "__main__":
    if not init_database():
        sys.exit(1)
