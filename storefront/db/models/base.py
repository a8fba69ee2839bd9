"""
Базовый класс для всех моделей SQLAlchemy.

Использует новый Declarative API SQLAlchemy 2.0.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Текущее время UTC без tzinfo (так хранятся временные метки в БД)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_id() -> str:
    """Сгенерировать непрозрачный строковый идентификатор записи."""
    return str(uuid4())


class Base(DeclarativeBase):
    """
    Базовый класс для всех моделей.

    Наследуется от DeclarativeBase для использования нового API SQLAlchemy 2.0.
    """
    pass


class IdMixin:
    """Строковый UUID в качестве первичного ключа."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)


class TimestampMixin:
    """Временные метки создания и обновления."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now
    )
