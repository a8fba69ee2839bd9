import pytest
from sqlalchemy import select

from storefront.db.models import Category
from storefront.schemas.category import CategoryOut
from storefront.schemas.pagination import PageMeta, PageParams, paginate


@pytest.mark.parametrize(
    "total, total_pages",
    [(0, 0), (1, 1), (20, 1), (21, 2), (40, 2)],
)
def test_total_pages(total, total_pages):
    assert PageMeta.create(1, 20, total).total_pages == total_pages


def test_paginate_counts_before_slicing(db, make_category):
    for name in ["Audio", "Cameras", "Drones", "Phones", "Tablets"]:
        make_category(name)
    stmt = select(Category).where(Category.name != "Drones").order_by(Category.name)

    page = paginate(db, stmt, PageParams(page=2, page_size=3))

    assert [c.name for c in page.rows] == ["Tablets"]
    assert page.meta.model_dump() == {"page": 2, "page_size": 3, "total": 4, "total_pages": 2}


def test_page_renders_items_with_schema(db, make_category):
    make_category("Audio")

    body = paginate(db, select(Category), PageParams(page=1, page_size=20)).render(CategoryOut)

    assert body["meta"]["total"] == 1
    assert body["items"][0]["slug"] == "audio"
