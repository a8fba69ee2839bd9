"""
Агрегатор витрины: товары, сгруппированные по категориям.

Параллельно читает активные категории и активные товары, раскладывает
товары по категориям с ограничением на количество в каждой и отдает
упорядоченный список блоков для главной страницы.
"""

import asyncio
import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Dict, Generic, Hashable, Iterable, List, Optional, TypeVar

from storefront.core.config import settings
from storefront.services.catalog_store import (
    CategoryRecord,
    CategoryStore,
    ProductRecord,
    ProductStore,
    SqlCategoryStore,
    SqlProductStore,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AggregationFailed(Exception):
    """Не удалось прочитать категории или товары."""


@dataclass
class CategoryGroup:
    """Блок витрины: категория и её последние товары."""

    category: CategoryRecord
    products: List[ProductRecord]


class BoundedBuckets(Generic[T]):
    """
    Словарь списков с ограничением длины каждого списка.

    Элемент добавляется только пока в его корзине меньше `limit` элементов,
    поэтому обрезать списки после группировки не нужно.
    """

    def __init__(self, limit: int):
        if limit < 1:
            raise ValueError("limit must be positive")
        self.limit = limit
        self._buckets: Dict[Hashable, List[T]] = {}

    def add(self, key: Hashable, item: T) -> bool:
        """Добавить элемент. Возвращает False, если корзина уже заполнена."""
        bucket = self._buckets.setdefault(key, [])
        if len(bucket) >= self.limit:
            return False
        bucket.append(item)
        return True

    def get(self, key: Hashable) -> List[T]:
        return list(self._buckets.get(key, ()))

    def __len__(self) -> int:
        return len(self._buckets)


def group_products_by_category(
    categories: Iterable[CategoryRecord],
    products: Iterable[ProductRecord],
    limit: int,
) -> List[CategoryGroup]:
    """
    Разложить товары по категориям.

    Args:
        categories: Категории в порядке вывода
        products: Товары в порядке выборки (новые первыми)
        limit: Максимум товаров в категории

    Returns:
        List[CategoryGroup]: Блоки в порядке категорий, пустые отброшены
    """
    buckets: BoundedBuckets[ProductRecord] = BoundedBuckets(limit)
    for product in products:
        buckets.add(product.category_id, product)

    groups = []
    for category in categories:
        items = buckets.get(category.id)
        if items:
            groups.append(CategoryGroup(category=category, products=items))
    return groups


class CatalogAggregator:
    """
    Сборщик блоков "товары по категориям" для главной страницы.

    Обе выборки выполняются одновременно в пуле потоков; если хотя бы одна
    падает, падает вся операция, частичных результатов не бывает.
    """

    def __init__(
        self,
        category_store: CategoryStore,
        product_store: ProductStore,
        limit: Optional[int] = None,
        executor: Optional[Executor] = None,
    ):
        self.category_store = category_store
        self.product_store = product_store
        self.limit = settings.CATEGORY_PRODUCTS_LIMIT if limit is None else limit
        if self.limit < 1:
            raise ValueError("limit must be positive")
        self.executor = executor

    async def _fetch(self):
        loop = asyncio.get_running_loop()
        return await asyncio.gather(
            loop.run_in_executor(self.executor, self.category_store.list_active),
            loop.run_in_executor(self.executor, self.product_store.list_active_joined),
        )

    async def aggregate(self, strict: bool = False) -> List[CategoryGroup]:
        """
        Собрать блоки витрины.

        Args:
            strict: Бросать AggregationFailed вместо пустого результата

        Returns:
            List[CategoryGroup]: Блоки категорий; пустой список, если данных
            нет или чтение не удалось (в нестрогом режиме)

        Raises:
            AggregationFailed: Ошибка чтения хранилища (только strict=True)
        """
        try:
            categories, products = await self._fetch()
        except Exception as e:
            logger.error(f"Error fetching categories with products: {e}")
            if strict:
                raise AggregationFailed(str(e)) from e
            return []

        groups = group_products_by_category(categories, products, self.limit)
        logger.info(
            f"Aggregated {len(groups)} category groups "
            f"from {len(categories)} categories and {len(products)} products"
        )
        return groups


def get_catalog_aggregator() -> CatalogAggregator:
    """Dependency: агрегатор поверх таблиц базы данных."""
    return CatalogAggregator(SqlCategoryStore(), SqlProductStore())
