"""
API endpoints поиска товаров.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, contains_eager

from storefront.db.database import get_db
from storefront.db.models import Category, Product
from storefront.schemas.product import ProductCardOut

router = APIRouter()


@router.get("/products", response_model=dict)
def search_products(
    q: str = Query("", description="Поиск по названию, описанию и артикулу"),
    category: Optional[str] = Query(None, description="ID категории"),
    limit: int = Query(10, ge=1, le=100, description="Максимум результатов"),
    db: Session = Depends(get_db),
):
    """
    Поиск активных товаров.

    Без поискового запроса и без категории возвращает пустой результат.
    Поиск регистронезависимый (ILIKE), результаты отсортированы по названию.

    Args:
        q: Поисковый запрос
        category: Фильтр по ID категории
        limit: Максимум результатов
        db: Сессия базы данных

    Returns:
        dict: {"products": [...], "total": N, "query": q}
    """
    query = q.strip()
    if not query and not category:
        return {"products": [], "total": 0, "query": ""}

    stmt = (
        select(Product)
        .join(Product.category)
        .options(contains_eager(Product.category))
        .where(Product.is_active.is_(True), Category.is_active.is_(True))
    )

    if query:
        pattern = f"%{query}%"
        stmt = stmt.where(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.sku.ilike(pattern),
            )
        )

    if category:
        stmt = stmt.where(Product.category_id == category)

    stmt = stmt.order_by(Product.name.asc()).limit(limit)
    products = [
        ProductCardOut.model_validate(p).model_dump() for p in db.scalars(stmt).all()
    ]

    return {"products": products, "total": len(products), "query": query}
