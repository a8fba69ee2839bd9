"""
Модель клиента магазина.
"""

from typing import List, Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdMixin, TimestampMixin


class Customer(IdMixin, TimestampMixin, Base):
    """
    Модель клиента.

    Attributes:
        email: Email (уникальный)
        first_name: Имя
        last_name: Фамилия
        phone: Телефон
        address_line_1: Адрес, строка 1
        address_line_2: Адрес, строка 2
        city: Город
        state: Регион
        postal_code: Почтовый индекс
        country: Страна
        is_active: Активен ли клиент
        orders: Заказы клиента
    """

    __tablename__ = "customers"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Адрес
    address_line_1: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address_line_2: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    country: Mapped[str] = mapped_column(String(100))

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    orders: Mapped[List["Order"]] = relationship(
        back_populates="customer", order_by="Order.created_at.desc()"
    )

    def __repr__(self) -> str:
        return f"<Customer(id='{self.id}', email='{self.email}')>"
