"""
Модель категории товаров.
"""

from typing import List, Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdMixin, TimestampMixin


class Category(IdMixin, TimestampMixin, Base):
    """
    Модель категории товаров.

    Attributes:
        id: Уникальный идентификатор категории
        name: Отображаемое название
        slug: URL-friendly название категории
        description: Описание категории
        image_url: Иконка / превью категории
        banner_image_url: Баннер блока категории на главной
        is_active: Показывать ли категорию на витрине
        products: Связь с товарами в этой категории
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    banner_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Удаление категории с товарами запрещено (RESTRICT на стороне товара)
    products: Mapped[List["Product"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id='{self.id}', slug='{self.slug}')>"
