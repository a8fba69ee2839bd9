"""
Модель района доставки.
"""

from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin


class District(IdMixin, TimestampMixin, Base):
    """
    Район доставки со своей стоимостью.

    Attributes:
        name: Название района
        delivery_charge: Стоимость доставки
        is_active: Доступен ли район при оформлении заказа
    """

    __tablename__ = "districts"

    name: Mapped[str] = mapped_column(String(255), index=True)
    delivery_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
