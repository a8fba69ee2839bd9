"""
Схемы клиентов магазина.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CustomerBase(BaseModel):
    """Базовая схема клиента."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    address_line_1: Optional[str] = None
    address_line_2: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    is_active: bool = True


class CustomerCreate(CustomerBase):
    """Схема для создания клиента."""

    country: Optional[str] = Field(None, max_length=100)


class CustomerUpdate(BaseModel):
    """Схема для частичного обновления клиента."""

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    address_line_1: Optional[str] = None
    address_line_2: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class CustomerOut(CustomerBase):
    """Схема для вывода клиента."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    country: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CustomerOrderOut(BaseModel):
    """Заказ в карточке клиента."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: str
    total_amount: float
    status: str
    payment_status: str
    created_at: Optional[datetime] = None


class CustomerDetailOut(CustomerOut):
    orders: List[CustomerOrderOut] = []
