"""
Схемы категорий.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryOut(BaseModel):
    """Категория для витрины."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    banner_image_url: Optional[str] = None


class CategoryAdminOut(CategoryOut):
    """Категория для админки."""

    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryCreate(BaseModel):
    """Схема для создания категории."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, description="Генерируется из name, если не задан")
    description: Optional[str] = None
    image_url: Optional[str] = None
    banner_image_url: Optional[str] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v

    @field_validator("slug", "description", "image_url", "banner_image_url")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class CategoryUpdate(CategoryCreate):
    """Схема для обновления категории (полная замена полей)."""
