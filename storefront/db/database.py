"""
Конфигурация базы данных.

Содержит настройки подключения к БД и фабрику сессий.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from storefront.core.config import settings


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Создать движок SQLAlchemy для указанного URL.

    Для SQLite разрешаем использование соединения из разных потоков:
    агрегатор витрины читает таблицы параллельно в пуле потоков.
    """
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        url,
        pool_pre_ping=True,  # Проверка соединения перед использованием
        future=True,
        echo=echo,
        connect_args=connect_args,
    )


# Создание движка SQLAlchemy
engine = build_engine(settings.DATABASE_URL, echo=bool(settings.DEBUG))


# Фабрика сессий базы данных
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
    expire_on_commit=False,
)


def get_db() -> Generator:
    """
    Dependency для получения сессии базы данных.

    Yields:
        Session: Сессия SQLAlchemy

    Note:
        Автоматически закрывает сессию после использования
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_models(bind: Engine = None) -> None:
    """Создать все таблицы, описанные в моделях."""
    from storefront.db.models import Base

    Base.metadata.create_all(bind=bind or engine)
