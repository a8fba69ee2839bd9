"""
Схемы ответов витрины: блоки категорий и состояние карусели.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from storefront.schemas.category import CategoryOut
from storefront.schemas.product import ProductCardOut
from storefront.schemas.slider import SliderOut


class CategoryGroupOut(BaseModel):
    """Категория и не более N её последних товаров."""

    model_config = ConfigDict(from_attributes=True)

    category: CategoryOut
    products: List[ProductCardOut]


class CategoryGroupsResponse(BaseModel):
    groups: List[CategoryGroupOut]


class CarouselOut(BaseModel):
    """Начальное состояние карусели для клиента."""

    index: int
    count: int
    current: Optional[SliderOut] = None
    controls_enabled: bool
    auto_advance: bool
    interval_seconds: float


class SlidersResponse(BaseModel):
    sliders: List[SliderOut]
    carousel: CarouselOut
