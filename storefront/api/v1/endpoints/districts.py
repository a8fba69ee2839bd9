"""
API endpoints районов доставки для оформления заказа.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.database import get_db
from storefront.db.models import District
from storefront.schemas.district import DistrictPublicOut

router = APIRouter()


@router.get("", response_model=dict)
def list_districts(db: Session = Depends(get_db)):
    """Активные районы доставки, отсортированные по названию."""
    stmt = select(District).where(District.is_active.is_(True)).order_by(District.name)
    return {
        "districts": [
            DistrictPublicOut.model_validate(d).model_dump()
            for d in db.scalars(stmt).all()
        ]
    }
