from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DistrictPublicOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    delivery_charge: float


class DistrictOut(DistrictPublicOut):
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DistrictCreate(BaseModel):
    """Схема для создания / обновления района доставки."""

    name: str = Field(..., min_length=1, max_length=255)
    delivery_charge: float = Field(..., ge=0)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("District name is required")
        return v
