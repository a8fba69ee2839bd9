"""
API endpoints промо-блоков главной страницы.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.database import get_db
from storefront.db.models import PromotionalFeature
from storefront.schemas.promotional_feature import PromotionalFeatureOut

router = APIRouter()


@router.get("", response_model=List[PromotionalFeatureOut])
def list_promotional_features(db: Session = Depends(get_db)):
    """Активные промо-блоки в порядке показа."""
    stmt = (
        select(PromotionalFeature)
        .where(PromotionalFeature.is_active.is_(True))
        .order_by(PromotionalFeature.display_order, PromotionalFeature.created_at)
    )
    return db.scalars(stmt).all()
