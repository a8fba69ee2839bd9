"""
Схемы заказов для админки.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class ShippingAddress(BaseModel):
    """Адрес доставки; район должен существовать среди районов доставки."""

    line_1: str = Field(..., min_length=1)
    line_2: Optional[str] = None
    city: str = Field(..., min_length=1, max_length=100)
    district: str = Field(..., min_length=1, max_length=255)
    country: Optional[str] = Field(None, max_length=100)


class OrderItemIn(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class OrderCreate(BaseModel):
    """
    Оформление заказа.

    Цены берутся из товаров на момент оформления (sale_price, если задана),
    стоимость доставки - из района доставки.
    """

    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1, max_length=30)
    customer_email: Optional[EmailStr] = None
    shipping_address: ShippingAddress
    items: List[OrderItemIn] = Field(..., min_length=1)
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def required_not_blank(cls, v: str, info) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} is required")
        return v


class OrderUpdate(BaseModel):
    """
    Частичное обновление заказа.

    Статусы проверяются эндпоинтом (400 для неизвестного значения).
    """

    status: Optional[str] = None
    payment_status: Optional[str] = None
    notes: Optional[str] = None
    customer_name: Optional[str] = Field(None, min_length=1)
    customer_phone: Optional[str] = Field(None, min_length=1, max_length=30)
    shipping_address: Optional[ShippingAddress] = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: Optional[str] = None
    product_name: str
    product_sku: str
    quantity: int
    unit_price: float
    total_price: float


class OrderCustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


class OrderOut(BaseModel):
    """Заказ в списке админки."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: str
    customer_id: Optional[str] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    shipping_address_line_1: Optional[str] = None
    shipping_address_line_2: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_district: Optional[str] = None
    shipping_country: Optional[str] = None
    shipping_cost: float
    total_amount: float
    status: str
    payment_status: str
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderDetailOut(OrderOut):
    """Заказ с позициями и клиентом."""

    items: List[OrderItemOut] = []
    customer: Optional[OrderCustomerOut] = None
