"""
API endpoints для работы с категориями товаров на витрине.

Содержит список активных категорий и блоки "товары по категориям"
для главной страницы.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.database import get_db
from storefront.db.models import Category
from storefront.schemas.category import CategoryOut
from storefront.schemas.storefront import CategoryGroupOut, CategoryGroupsResponse
from storefront.services.catalog_aggregator import CatalogAggregator, get_catalog_aggregator

router = APIRouter()


@router.get("")
def list_categories(
    slug: Optional[str] = Query(None, description="Фильтр по slug"),
    db: Session = Depends(get_db),
):
    """
    Получить список активных категорий.

    Без фильтра возвращает все активные категории, отсортированные по
    названию, в обертке {"categories": [...]}. С фильтром по slug
    возвращает просто список найденных категорий.

    Args:
        slug: Slug категории
        db: Сессия базы данных

    Example:
        {"categories": [{"id": "...", "name": "Phones", "slug": "phones"}]}
    """
    stmt = select(Category).where(Category.is_active.is_(True))
    if slug:
        stmt = stmt.where(Category.slug == slug)
    else:
        stmt = stmt.order_by(Category.name.asc())

    categories = [
        CategoryOut.model_validate(c).model_dump() for c in db.scalars(stmt).all()
    ]

    if slug:
        return categories
    return {"categories": categories}


@router.get("/with-products", response_model=CategoryGroupsResponse)
async def list_categories_with_products(
    aggregator: CatalogAggregator = Depends(get_catalog_aggregator),
):
    """
    Получить категории вместе с их последними товарами.

    Каждая активная категория, в которой есть активные товары, попадает в
    ответ с не более чем CATEGORY_PRODUCTS_LIMIT самыми новыми товарами.
    Категории без товаров пропускаются. При ошибке чтения данных
    возвращается пустой список (ошибка пишется в лог).

    Returns:
        CategoryGroupsResponse: {"groups": [{"category": ..., "products": [...]}]}
    """
    groups = await aggregator.aggregate()
    return CategoryGroupsResponse(
        groups=[CategoryGroupOut.model_validate(group) for group in groups]
    )
