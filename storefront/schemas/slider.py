"""
Схемы слайдов карусели.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SliderOut(BaseModel):
    """Слайд карусели."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    subtitle: Optional[str] = None
    image_url: str
    link_url: Optional[str] = None
    button_text: Optional[str] = None
    order_index: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SliderCreate(BaseModel):
    """
    Схема для создания слайда.

    Если order_index не задан, слайд ставится в конец карусели.
    """

    title: str = Field(..., min_length=1, max_length=255)
    subtitle: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    link_url: Optional[str] = None
    button_text: Optional[str] = Field(None, max_length=100)
    order_index: Optional[int] = Field(None, ge=0)
    is_active: bool = True

    @field_validator("title", "image_url")
    @classmethod
    def required_not_blank(cls, v: str, info) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"Slider {info.field_name} is required")
        return v

    @field_validator("subtitle", "link_url", "button_text")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class SliderUpdate(SliderCreate):
    """Схема для обновления слайда."""
