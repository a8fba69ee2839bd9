"""
Модель промо-блока главной страницы ("Бесплатная доставка", "Гарантия" и т.п.).
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin


class PromotionalFeature(IdMixin, TimestampMixin, Base):
    """
    Промо-блок витрины.

    Attributes:
        title: Заголовок
        description: Короткое описание
        icon_name: Имя иконки на фронтенде
        is_active: Показывать ли блок на витрине
        display_order: Порядок показа (меньше - раньше)
    """

    __tablename__ = "promotional_features"

    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
