"""
Основной роутер API v1.

Подключает все endpoint'ы приложения.
"""

from fastapi import APIRouter

from storefront.api.v1.endpoints import (
    admin,
    categories,
    districts,
    images,
    products,
    promotions,
    search,
    sliders,
)

# Создание основного роутера API v1
api_router = APIRouter()

# Подключение роутеров для различных ресурсов
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
api_router.include_router(sliders.router, prefix="/sliders", tags=["sliders"])
api_router.include_router(districts.router, prefix="/districts", tags=["districts"])
api_router.include_router(
    promotions.router, prefix="/promotional-features", tags=["promotional-features"]
)
api_router.include_router(images.router, prefix="/images", tags=["images"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
