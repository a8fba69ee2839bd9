from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PromotionalFeatureOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    icon_name: Optional[str] = None
    is_active: bool
    display_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PromotionalFeatureCreate(BaseModel):
    """Без display_order блок ставится после последнего."""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    icon_name: Optional[str] = Field(None, max_length=100)
    is_active: bool = True
    display_order: Optional[int] = Field(None, ge=0)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Feature title is required")
        return v


class PromotionalFeatureUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    icon_name: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0)
