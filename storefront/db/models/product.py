"""
Модель товара.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdMixin, TimestampMixin


class Product(IdMixin, TimestampMixin, Base):
    """
    Модель товара.

    Attributes:
        id: Уникальный идентификатор товара
        category_id: ID категории товара
        name: Название товара
        description: Описание товара
        price: Цена
        sale_price: Цена со скидкой (если есть)
        sku: Артикул, используется в URL карточки товара
        images: Упорядоченный список URL изображений (первое - главное)
        stock_quantity: Остаток на складе
        is_active: Показывать ли товар на витрине
        is_featured: Рекомендуемый товар
        category: Связь с категорией
    """

    __tablename__ = "products"

    category_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("categories.id", ondelete="RESTRICT"), index=True
    )
    name: Mapped[str] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    sale_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    sku: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    images: Mapped[List[str]] = mapped_column(JSON, default=list)
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)

    # Связи с другими моделями
    category: Mapped["Category"] = relationship(back_populates="products")

    @property
    def primary_image(self) -> Optional[str]:
        """Главное изображение товара."""
        return self.images[0] if self.images else None

    def __repr__(self) -> str:
        return f"<Product(id='{self.id}', sku='{self.sku}')>"
