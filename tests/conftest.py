"""
Общие фикстуры тестов.

Каждый тест получает собственную SQLite базу во временной директории.
Файл, а не :memory:, потому что агрегатор читает таблицы из разных потоков.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("STORAGE_TYPE", "local")

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from storefront.core.auth import AuthService
from storefront.db.database import build_engine, get_db, init_models
from storefront.db.models import (
    Category,
    Customer,
    District,
    Order,
    Product,
    PromotionalFeature,
    Slider,
    User,
)
from storefront.main import app
from storefront.services.catalog_aggregator import CatalogAggregator, get_catalog_aggregator
from storefront.services.catalog_store import SqlCategoryStore, SqlProductStore
from storefront.services.storage_service import LocalStorageProvider, get_storage_service

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    init_models(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return LocalStorageProvider(str(tmp_path / "uploads"))


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def override_aggregator():
        return CatalogAggregator(
            SqlCategoryStore(session_factory), SqlProductStore(session_factory)
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog_aggregator] = override_aggregator
    app.dependency_overrides[get_storage_service] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ==================== ФАБРИКИ ДАННЫХ ====================


@pytest.fixture
def make_category(db):
    counter = {"n": 0}

    def factory(name, slug=None, is_active=True, **kwargs):
        counter["n"] += 1
        category = Category(
            name=name,
            slug=slug or name.lower().replace(" ", "-"),
            is_active=is_active,
            created_at=kwargs.pop("created_at", BASE_TIME + timedelta(minutes=counter["n"])),
            **kwargs,
        )
        db.add(category)
        db.commit()
        return category

    return factory


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def factory(category, name=None, minutes=None, is_active=True, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        product = Product(
            name=name or f"Product {n}",
            sku=kwargs.pop("sku", f"SKU-{n:04d}"),
            price=Decimal(kwargs.pop("price", "10.00")),
            stock_quantity=kwargs.pop("stock_quantity", 5),
            category_id=category.id,
            is_active=is_active,
            created_at=BASE_TIME + timedelta(minutes=minutes if minutes is not None else n),
            **kwargs,
        )
        db.add(product)
        db.commit()
        return product

    return factory


@pytest.fixture
def make_slider(db):
    def factory(title, order_index, is_active=True, **kwargs):
        slider = Slider(
            title=title,
            image_url=kwargs.pop("image_url", f"/static/sliders/{title.lower()}.webp"),
            order_index=order_index,
            is_active=is_active,
            **kwargs,
        )
        db.add(slider)
        db.commit()
        return slider

    return factory


@pytest.fixture
def make_district(db):
    def factory(name, delivery_charge="60.00", is_active=True):
        district = District(
            name=name, delivery_charge=Decimal(delivery_charge), is_active=is_active
        )
        db.add(district)
        db.commit()
        return district

    return factory


@pytest.fixture
def make_feature(db):
    def factory(title, display_order, is_active=True, **kwargs):
        feature = PromotionalFeature(
            title=title, display_order=display_order, is_active=is_active, **kwargs
        )
        db.add(feature)
        db.commit()
        return feature

    return factory


@pytest.fixture
def make_customer(db):
    def factory(email, first_name="Rahim", last_name="Uddin", **kwargs):
        customer = Customer(
            email=email,
            first_name=first_name,
            last_name=last_name,
            country=kwargs.pop("country", "Bangladesh"),
            **kwargs,
        )
        db.add(customer)
        db.commit()
        return customer

    return factory


@pytest.fixture
def make_order(db):
    counter = {"n": 0}

    def factory(customer, total="100.00", status="pending", **kwargs):
        counter["n"] += 1
        order = Order(
            order_number=f"ORD-{counter['n']:05d}",
            customer_id=customer.id if customer else None,
            customer_name=f"{customer.first_name} {customer.last_name}" if customer else "Guest",
            customer_email=customer.email if customer else None,
            total_amount=Decimal(total),
            status=status,
            created_at=BASE_TIME + timedelta(days=counter["n"]),
            **kwargs,
        )
        db.add(order)
        db.commit()
        return order

    return factory


# ==================== АУТЕНТИФИКАЦИЯ ====================

ADMIN_PASSWORD = "admin-password"


@pytest.fixture
def make_user(db):
    def factory(username, role="user", is_active=True, password=ADMIN_PASSWORD):
        user = User(
            username=username,
            email=f"{username}@example.com",
            hashed_password=AuthService.get_password_hash(password),
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return factory


@pytest.fixture
def admin_user(make_user):
    return make_user("admin", role="admin")


@pytest.fixture
def admin_headers(admin_user):
    token = AuthService.create_access_token(data={"sub": admin_user.id})
    return {"Authorization": f"Bearer {token}"}
