"""
API endpoints баннерной карусели на главной странице.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.database import get_db
from storefront.db.models import Slider
from storefront.schemas.slider import SliderOut
from storefront.schemas.storefront import CarouselOut, SlidersResponse
from storefront.services.carousel import CarouselController

router = APIRouter()


@router.get("", response_model=SlidersResponse)
def list_sliders(db: Session = Depends(get_db)):
    """
    Получить активные слайды и начальное состояние карусели.

    Слайды отсортированы по order_index. Блок carousel описывает, с какого
    слайда начинать, доступны ли кнопки навигации и нужна ли автопрокрутка.
    """
    stmt = (
        select(Slider)
        .where(Slider.is_active.is_(True))
        .order_by(Slider.order_index.asc(), Slider.created_at.asc())
    )
    sliders = [SliderOut.model_validate(s) for s in db.scalars(stmt).all()]

    state = CarouselController(sliders).snapshot()
    carousel = CarouselOut(
        index=state.index,
        count=state.count,
        current=state.current,
        controls_enabled=state.controls_enabled,
        auto_advance=state.auto_advance,
        interval_seconds=state.interval_seconds,
    )
    return SlidersResponse(sliders=sliders, carousel=carousel)
