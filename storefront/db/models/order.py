"""
Модели заказа и позиций заказа.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdMixin, TimestampMixin

ORDER_STATUSES = ("pending", "confirmed", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed")

# Заказы, которые еще можно отменить из админки
CANCELLABLE_STATUSES = ("pending", "cancelled")


class Order(IdMixin, TimestampMixin, Base):
    """
    Модель заказа.

    Attributes:
        order_number: Номер заказа для клиента
        customer_id: ID клиента (если оформлен зарегистрированным клиентом)
        customer_name: Имя получателя
        customer_email: Email получателя
        customer_phone: Телефон получателя
        shipping_*: Адрес доставки, район определяет стоимость доставки
        shipping_cost: Стоимость доставки на момент оформления
        total_amount: Сумма заказа вместе с доставкой
        status: Статус заказа
        payment_status: Статус оплаты
        payment_method: Способ оплаты
        notes: Комментарий
        items: Позиции заказа
    """

    __tablename__ = "orders"

    order_number: Mapped[str] = mapped_column(String(64), unique=True)
    customer_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True, index=True
    )

    # Данные получателя
    customer_name: Mapped[str] = mapped_column(Text)
    customer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Доставка
    shipping_address_line_1: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shipping_address_line_2: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shipping_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    shipping_district: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    shipping_country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    shipping_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)

    # Финансы и статусы
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    status: Mapped[str] = mapped_column(String(32), default="pending", index=True)
    payment_status: Mapped[str] = mapped_column(String(32), default="pending")
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer: Mapped[Optional["Customer"]] = relationship(back_populates="orders")
    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "status in ('pending','confirmed','processing','shipped','delivered','cancelled')",
            name="ck_orders_status",
        ),
        CheckConstraint(
            "payment_status in ('pending','paid','failed')",
            name="ck_orders_payment_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Order(id='{self.id}', number='{self.order_number}', status='{self.status}')>"


class OrderItem(IdMixin, Base):
    """
    Позиция заказа.

    Название, артикул и цена копируются из товара при оформлении,
    поэтому позиция не меняется при последующем редактировании товара.

    Attributes:
        order_id: ID заказа
        product_id: ID товара (NULL, если товар удален)
        product_name: Название товара (снимок)
        product_sku: Артикул товара (снимок)
        quantity: Количество
        unit_price: Цена за единицу (снимок)
        total_price: unit_price * quantity
    """

    __tablename__ = "order_items"

    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )
    product_name: Mapped[str] = mapped_column(Text)
    product_sku: Mapped[str] = mapped_column(String(64))
    quantity: Mapped[int] = mapped_column(Integer)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    order: Mapped[Order] = relationship(back_populates="items")
