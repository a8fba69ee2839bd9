"""
Хранилища каталога для витрины.

Предоставляют агрегатору единый интерфейс чтения активных категорий
и активных товаров независимо от того, откуда берутся данные.
Возвращают простые dataclass-записи, а не ORM объекты: чтение выполняется
в отдельном потоке со своей сессией, которая закрывается до возврата.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.database import SessionLocal
from storefront.db.models import Category, Product


@dataclass(frozen=True)
class CategoryRef:
    """Краткая информация о категории, приклеенная к товару."""

    id: str
    name: str
    slug: str


@dataclass
class CategoryRecord:
    """Категория витрины."""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    banner_image_url: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_model(cls, category: Category) -> "CategoryRecord":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            image_url=category.image_url,
            banner_image_url=category.banner_image_url,
            is_active=category.is_active,
        )


@dataclass
class ProductRecord:
    """Товар витрины вместе с данными своей категории."""

    id: str
    name: str
    price: Decimal
    sku: str
    category: CategoryRef
    sale_price: Optional[Decimal] = None
    images: List[str] = field(default_factory=list)
    stock_quantity: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def category_id(self) -> str:
        return self.category.id

    @classmethod
    def from_model(cls, product: Product, category: CategoryRef) -> "ProductRecord":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            sale_price=product.sale_price,
            sku=product.sku,
            images=list(product.images or []),
            stock_quantity=product.stock_quantity,
            is_active=product.is_active,
            created_at=product.created_at,
            category=category,
        )


class CategoryStore(ABC):
    """Источник категорий."""

    @abstractmethod
    def list_active(self) -> List[CategoryRecord]:
        """Активные категории, отсортированные по названию."""


class ProductStore(ABC):
    """Источник товаров."""

    @abstractmethod
    def list_active_joined(self) -> List[ProductRecord]:
        """
        Активные товары активных категорий, новые первыми.

        Товар неактивной категории в выборку не попадает (INNER JOIN).
        """


class SqlCategoryStore(CategoryStore):
    """Категории из таблицы categories."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def list_active(self) -> List[CategoryRecord]:
        stmt = (
            select(Category)
            .where(Category.is_active.is_(True))
            .order_by(Category.name.asc())
        )
        with self.session_factory() as db:
            return [CategoryRecord.from_model(c) for c in db.scalars(stmt).all()]


class SqlProductStore(ProductStore):
    """Товары из таблицы products с INNER JOIN на активную категорию."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def list_active_joined(self) -> List[ProductRecord]:
        stmt = (
            select(Product, Category.id, Category.name, Category.slug)
            .join(Category, Product.category_id == Category.id)
            .where(Product.is_active.is_(True), Category.is_active.is_(True))
            .order_by(Product.created_at.desc(), Product.id)
        )
        with self.session_factory() as db:
            rows = db.execute(stmt).all()
            return [
                ProductRecord.from_model(
                    product, CategoryRef(id=cat_id, name=cat_name, slug=cat_slug)
                )
                for product, cat_id, cat_name, cat_slug in rows
            ]
