"""
API endpoints для карточки товара на витрине.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session, contains_eager

from storefront.db.database import get_db
from storefront.db.models import Category, Product
from storefront.schemas.product import ProductOut

router = APIRouter()


@router.get("/{sku}", response_model=ProductOut)
def get_product(sku: str, db: Session = Depends(get_db)):
    """
    Получить товар по артикулу.

    Товар неактивной категории на витрине не показывается.

    Args:
        sku: Артикул товара
        db: Сессия базы данных

    Raises:
        HTTPException: Если товар не найден
    """
    stmt = (
        select(Product)
        .join(Product.category)
        .options(contains_eager(Product.category))
        .where(
            Product.sku == sku,
            Product.is_active.is_(True),
            Category.is_active.is_(True),
        )
    )
    product = db.scalar(stmt)
    if not product:
        raise HTTPException(404, detail="Product not found")
    return product
