from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryRefOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str


class ProductCardOut(BaseModel):
    """Карточка товара в списках витрины."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: float
    sale_price: Optional[float] = None
    images: List[str] = []
    stock_quantity: int
    sku: str
    category: CategoryRefOut


class ProductOut(ProductCardOut):
    """Полная карточка товара."""

    description: Optional[str] = None
    is_active: bool
    is_featured: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductCreate(BaseModel):
    """Схема для создания товара в админке."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: float = Field(..., gt=0, description="Цена должна быть больше 0")
    sale_price: Optional[float] = Field(None, ge=0)
    category_id: str
    images: List[str] = []
    stock_quantity: int = Field(0, ge=0)
    sku: Optional[str] = Field(None, max_length=64, description="Генерируется из name, если не задан")
    is_active: bool = True
    is_featured: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product name is required")
        return v


class ProductUpdate(BaseModel):
    """
    Частичное обновление товара: меняются только переданные поля.

    NOT NULL поля (name, price, category_id, sku, ...) со значением null
    пропускаются.
    """

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0, description="Цена должна быть больше 0")
    sale_price: Optional[float] = Field(None, ge=0)
    category_id: Optional[str] = None
    images: Optional[List[str]] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = Field(None, min_length=1, max_length=64)
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None

    @field_validator("name", "sku")
    @classmethod
    def strip_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank")
        return v
