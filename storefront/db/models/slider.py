"""
Модель слайда баннерной карусели на главной странице.
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin

DEFAULT_BUTTON_TEXT = "Shop Now"


class Slider(IdMixin, TimestampMixin, Base):
    """
    Модель слайда.

    Attributes:
        title: Заголовок слайда
        subtitle: Подзаголовок
        image_url: Изображение слайда
        link_url: Ссылка кнопки
        button_text: Текст кнопки
        order_index: Порядок показа (по возрастанию)
        is_active: Показывать ли слайд на витрине
    """

    __tablename__ = "sliders"

    title: Mapped[str] = mapped_column(String(255))
    subtitle: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(Text)
    link_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    button_text: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, default=DEFAULT_BUTTON_TEXT
    )
    order_index: Mapped[int] = mapped_column(Integer, default=0, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        return f"<Slider(id='{self.id}', order_index={self.order_index})>"
