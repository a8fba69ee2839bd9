"""
Сервис заказов: оформление, изменение статусов и отмена.

Оформление и отмена меняют остатки товаров в той же транзакции,
что и сам заказ.
"""

import logging
import time
from collections import Counter
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.db.models import Customer, District, Order, OrderItem, Product
from storefront.db.models.order import CANCELLABLE_STATUSES, ORDER_STATUSES, PAYMENT_STATUSES
from storefront.schemas.order import OrderCreate, OrderUpdate

logger = logging.getLogger(__name__)


class OrderError(ValueError):
    """Заказ нельзя оформить или изменить с такими данными."""


def generate_order_number() -> str:
    """Номер вида ORD-<миллисекунды>-<9 символов>."""
    return f"ORD-{int(time.time() * 1000)}-{uuid4().hex[:9].upper()}"


def _shipping_fields(address) -> dict:
    return {
        "shipping_address_line_1": address.line_1,
        "shipping_address_line_2": address.line_2,
        "shipping_city": address.city,
        "shipping_district": address.district,
        "shipping_country": address.country or settings.DEFAULT_COUNTRY,
    }


class OrderService:
    """Операции над заказами поверх сессии SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def place(self, data: OrderCreate) -> Order:
        """
        Оформить заказ.

        Проверяет район доставки, наличие товаров и остатки, фиксирует цены
        позиций и списывает остатки.

        Raises:
            OrderError: Неизвестный район или товар, недостаточно остатка
        """
        district_name = data.shipping_address.district
        district = self.db.scalar(
            select(District).where(District.name == district_name, District.is_active.is_(True))
        )
        if district is None:
            raise OrderError(f"District not found: {district_name}")

        wanted = Counter()
        for item in data.items:
            wanted[item.product_id] += item.quantity

        products = {
            p.id: p
            for p in self.db.scalars(
                select(Product).where(Product.id.in_(list(wanted))).with_for_update()
            )
        }
        for product_id, quantity in wanted.items():
            product = products.get(product_id)
            if product is None:
                raise OrderError(f"Product not found: {product_id}")
            if product.stock_quantity < quantity:
                raise OrderError(f"Insufficient stock for {product.name}")

        order = Order(
            order_number=generate_order_number(),
            customer_id=self._customer_id(data.customer_email),
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            shipping_cost=district.delivery_charge,
            payment_method=data.payment_method,
            notes=data.notes,
            **_shipping_fields(data.shipping_address),
        )

        subtotal = Decimal("0")
        for item in data.items:
            product = products[item.product_id]
            unit_price = product.sale_price or product.price
            line_total = unit_price * item.quantity
            subtotal += line_total
            order.items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    product_sku=product.sku,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    total_price=line_total,
                )
            )
            product.stock_quantity -= item.quantity

        order.total_amount = subtotal + district.delivery_charge
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)

        logger.info(f"Order {order.order_number} placed: {len(data.items)} items, total {order.total_amount}")
        return order

    def _customer_id(self, email):
        # Заказ привязывается к зарегистрированному клиенту с тем же email
        if not email:
            return None
        return self.db.scalar(
            select(Customer.id).where(func.lower(Customer.email) == email.lower())
        )

    def update(self, order: Order, data: OrderUpdate) -> Order:
        """
        Применить частичное обновление.

        Raises:
            OrderError: Неизвестный статус заказа или оплаты
        """
        if data.status is not None and data.status not in ORDER_STATUSES:
            raise OrderError(f"Invalid order status: {data.status}")
        if data.payment_status is not None and data.payment_status not in PAYMENT_STATUSES:
            raise OrderError(f"Invalid payment status: {data.payment_status}")

        changes = data.model_dump(exclude_unset=True, exclude={"shipping_address"})
        for field, value in changes.items():
            # NOT NULL колонки не обнуляются, notes можно очистить
            if value is None and field != "notes":
                continue
            setattr(order, field, value)
        if data.shipping_address is not None:
            for field, value in _shipping_fields(data.shipping_address).items():
                setattr(order, field, value)

        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Order {order.order_number} updated: {sorted(changes)}")
        return order

    def cancel(self, order: Order) -> Order:
        """
        Отменить заказ и вернуть товары на склад.

        Повторная отмена уже отмененного заказа остатки не меняет.

        Raises:
            OrderError: Заказ уже в работе (не pending и не cancelled)
        """
        if order.status not in CANCELLABLE_STATUSES:
            raise OrderError(f"Cannot cancel order with status {order.status}")

        if order.status != "cancelled":
            for item in order.items:
                product = self.db.get(Product, item.product_id) if item.product_id else None
                if product is not None:
                    product.stock_quantity += item.quantity
            order.status = "cancelled"
            self.db.commit()
            self.db.refresh(order)
            logger.info(f"Order {order.order_number} cancelled, stock restored")

        return order
