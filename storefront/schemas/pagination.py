"""
Пагинация списков админки.

Все постраничные списки отдаются в одном формате:
{"items": [...], "meta": {"page", "page_size", "total", "total_pages"}}.
`total` считается по тому же запросу, что и страница, со всеми фильтрами.
"""

import math
from typing import Any, Dict, Sequence, Type

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PageMeta(BaseModel):
    """
    Метаданные пагинации.

    Attributes:
        page: Номер текущей страницы
        page_size: Размер страницы
        total: Количество записей, подходящих под фильтры
        total_pages: Количество страниц (0 для пустого списка)
    """

    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def create(cls, page: int, page_size: int, total: int) -> "PageMeta":
        total_pages = math.ceil(total / page_size)
        return cls(page=page, page_size=page_size, total=total, total_pages=total_pages)


class PageParams:
    """Dependency: номер и размер страницы из query-строки."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Номер страницы"),
        page_size: int = Query(
            DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Размер страницы"
        ),
    ):
        self.page = page
        self.page_size = page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def count_rows(db: Session, stmt: Select) -> int:
    """Количество строк запроса без учета сортировки и лимитов."""
    subquery = stmt.order_by(None).limit(None).offset(None).subquery()
    return db.scalar(select(func.count()).select_from(subquery)) or 0


def paginate(db: Session, stmt: Select, params: PageParams) -> "Page":
    """Выполнить запрос для одной страницы."""
    total = count_rows(db, stmt)
    rows = db.scalars(stmt.offset(params.offset).limit(params.page_size)).all()
    return Page(rows, PageMeta.create(params.page, params.page_size, total))


class Page:
    """Записи одной страницы и ее метаданные."""

    def __init__(self, rows: Sequence[Any], meta: PageMeta):
        self.rows = rows
        self.meta = meta

    def render(self, schema: Type[BaseModel]) -> Dict[str, Any]:
        """Ответ эндпоинта: записи, сериализованные схемой, плюс meta."""
        return {
            "items": [schema.model_validate(row).model_dump() for row in self.rows],
            "meta": self.meta.model_dump(),
        }
