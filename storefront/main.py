"""
Главный модуль FastAPI приложения Storefront Catalog API.

Содержит конфигурацию приложения, middleware и роутеры.
"""

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from storefront.api.v1.routers import api_router
from storefront.core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Storefront Catalog API",
    description="API витрины магазина: каталог, поиск, карусель и административная панель",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Подключение статических файлов для локального хранилища
if settings.STORAGE_TYPE == "local":
    uploads_path = Path(settings.STORAGE_PATH).resolve()
    if uploads_path.is_dir():
        app.mount("/static", StaticFiles(directory=str(uploads_path)), name="static")
        logger.info(f"Static files mounted at /static from directory: {uploads_path}")
    else:
        logger.warning(f"Uploads directory does not exist: {uploads_path}, static files not mounted")


# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: сузить в продакшене до доменов витрины и админки
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Filename", "X-Original-Size", "X-Optimized-Size"],
)


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Storefront Catalog API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix="/api/v1")
