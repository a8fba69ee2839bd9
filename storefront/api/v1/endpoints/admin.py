"""
API эндпоинты для административной панели.
"""

import logging
import time
from datetime import datetime, timedelta
from io import BytesIO
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from slugify import slugify
from sqlalchemy import desc, func, or_, select
from sqlalchemy.orm import Session, contains_eager, selectinload

from storefront.core.auth import auth_service, require_admin, utc_now, validate_role
from storefront.core.config import settings
from storefront.db.database import get_db
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
from storefront.db.models.order import ORDER_STATUSES
from storefront.db.models.slider import DEFAULT_BUTTON_TEXT
from storefront.db.models.user import ADMIN_ROLE
from storefront.schemas.admin import (
    CategoryProductCount,
    DashboardStats,
    InventoryStats,
    LoginRequest,
    LoginResponse,
    OrderDashboardStats,
    OverviewStats,
    PeriodInfo,
    PricingStats,
    ProductDashboardStats,
    RecentProduct,
    RoleUpdate,
    StatusSplit,
    UserOut,
)
from storefront.schemas.category import CategoryAdminOut, CategoryCreate, CategoryUpdate
from storefront.schemas.customer import (
    CustomerCreate,
    CustomerDetailOut,
    CustomerOut,
    CustomerUpdate,
)
from storefront.schemas.district import DistrictCreate, DistrictOut
from storefront.schemas.order import OrderCreate, OrderDetailOut, OrderOut, OrderUpdate
from storefront.schemas.pagination import PageParams, paginate
from storefront.schemas.product import ProductCreate, ProductOut, ProductUpdate
from storefront.schemas.promotional_feature import (
    PromotionalFeatureCreate,
    PromotionalFeatureOut,
    PromotionalFeatureUpdate,
)
from storefront.schemas.slider import SliderCreate, SliderOut, SliderUpdate
from storefront.services.image_service import ImageValidationError, image_service
from storefront.services.order_service import OrderError, OrderService
from storefront.services.storage_service import StorageProvider, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter()

LOW_STOCK_THRESHOLD = 10


def _get_or_404(db: Session, model, object_id: str, detail: str):
    obj = db.get(model, object_id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return obj


# ==================== АУТЕНТИФИКАЦИЯ ====================


@router.post("/auth/login", response_model=LoginResponse)
async def admin_login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """
    Вход в административную панель.

    Args:
        login_data: Данные для входа (username или email, password)
        db: Сессия базы данных

    Returns:
        JWT токен и информация о пользователе

    Raises:
        HTTPException: 401 при неверных учетных данных, 400 для
        отключенного аккаунта, 403 без прав администратора
    """
    user, access_token = auth_service.login_admin(
        db, login_data.username, login_data.password
    )
    return LoginResponse(
        access_token=access_token,
        expires_in=int(auth_service.token_lifetime().total_seconds()),
        user=UserOut.model_validate(user),
    )


@router.get("/check-users")
async def check_users(db: Session = Depends(get_db)):
    """Есть ли в системе хотя бы один администратор (экран первичной настройки)."""
    count = db.scalar(select(func.count(User.id)).where(User.role == ADMIN_ROLE)) or 0
    return {"has_admins": count > 0}


@router.get("/check-role/{user_id}")
async def check_role(
    user_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Роль пользователя по ID."""
    user = _get_or_404(db, User, user_id, "User not found")
    return {"role": user.role}


# ==================== ПОЛЬЗОВАТЕЛИ ====================


@router.get("/users", response_model=dict)
async def list_users(
    q: Optional[str] = Query(None, description="Поиск по username, email или имени"),
    role: Optional[str] = Query(None, description="Фильтр по роли"),
    paging: PageParams = Depends(),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Получить список пользователей с фильтрацией и пагинацией.

    Returns:
        Список пользователей с метаданными пагинации
    """
    stmt = select(User)
    if q:
        stmt = stmt.where(
            or_(
                User.username.ilike(f"%{q}%"),
                User.email.ilike(f"%{q}%"),
                User.full_name.ilike(f"%{q}%"),
            )
        )
    if role:
        stmt = stmt.where(User.role == role)

    return paginate(db, stmt.order_by(desc(User.created_at)), paging).render(UserOut)


@router.patch("/users/{user_id}/role", response_model=UserOut)
async def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Изменить роль пользователя.

    Raises:
        HTTPException: 400 для неизвестной роли, 404 если пользователь не найден
    """
    role = validate_role(payload.role)

    user = _get_or_404(db, User, user_id, "User not found")
    user.role = role
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} role changed to {user.role} by {current_user.username}")
    return user


# ==================== ДАШБОРД ====================


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard_stats(
    period: int = Query(30, ge=1, le=3650, description="Период в днях"),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Получить статистику для дашборда.

    Args:
        period: Период в днях для подсчета новых записей
        current_user: Текущий пользователь (должен быть админом)
        db: Сессия базы данных

    Returns:
        Статистика дашборда
    """
    end_date = utc_now()
    start_date = end_date - timedelta(days=period)

    def count(stmt) -> int:
        return db.scalar(stmt) or 0

    overview = OverviewStats(
        total_categories=count(select(func.count(Category.id))),
        total_products=count(select(func.count(Product.id))),
        total_sliders=count(select(func.count(Slider.id))),
        recent_products_count=count(
            select(func.count(Product.id)).where(Product.created_at >= start_date)
        ),
        recent_categories_count=count(
            select(func.count(Category.id)).where(Category.created_at >= start_date)
        ),
    )

    active_products = count(select(func.count(Product.id)).where(Product.is_active.is_(True)))
    by_status = StatusSplit(
        active=active_products, inactive=overview.total_products - active_products
    )

    # Остатки: 0 - нет в наличии, меньше порога - заканчивается
    inventory = InventoryStats(
        total_stock=count(select(func.coalesce(func.sum(Product.stock_quantity), 0))),
        low_stock_count=count(
            select(func.count(Product.id)).where(
                Product.stock_quantity > 0, Product.stock_quantity < LOW_STOCK_THRESHOLD
            )
        ),
        out_of_stock_count=count(
            select(func.count(Product.id)).where(Product.stock_quantity <= 0)
        ),
    )

    avg_price, max_price, min_price = db.execute(
        select(func.avg(Product.price), func.max(Product.price), func.min(Product.price))
        .where(Product.is_active.is_(True))
    ).one()
    pricing = PricingStats(
        average_price=float(avg_price or 0),
        highest_price=float(max_price or 0),
        lowest_price=float(min_price or 0),
    )

    recent = db.scalars(
        select(Product).order_by(desc(Product.created_at)).limit(10)
    ).all()

    category_rows = db.execute(
        select(
            Category.id,
            Category.name,
            Category.slug,
            func.count(Product.id).label("product_count"),
        )
        .outerjoin(Product, Product.category_id == Category.id)
        .group_by(Category.id, Category.name, Category.slug)
        .order_by(Category.name)
    ).all()

    active_sliders = count(select(func.count(Slider.id)).where(Slider.is_active.is_(True)))

    def split(model) -> StatusSplit:
        total = count(select(func.count(model.id)))
        active = count(select(func.count(model.id)).where(model.is_active.is_(True)))
        return StatusSplit(active=active, inactive=total - active)

    orders_by_status = dict.fromkeys(ORDER_STATUSES, 0)
    orders_by_status.update(
        db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status)).all()
    )
    orders = OrderDashboardStats(
        total=sum(orders_by_status.values()),
        pending=orders_by_status["pending"],
        recent=count(select(func.count(Order.id)).where(Order.created_at >= start_date)),
        by_status=orders_by_status,
        total_customers=count(select(func.count(Customer.id))),
    )

    return DashboardStats(
        overview=overview,
        products=ProductDashboardStats(
            by_status=by_status,
            inventory=inventory,
            pricing=pricing,
            recent=[RecentProduct.model_validate(p) for p in recent],
        ),
        categories=[
            CategoryProductCount(
                id=row.id, name=row.name, slug=row.slug, product_count=row.product_count
            )
            for row in category_rows
        ],
        sliders=StatusSplit(
            active=active_sliders, inactive=overview.total_sliders - active_sliders
        ),
        orders=orders,
        districts=split(District),
        promotional_features=split(PromotionalFeature),
        period=PeriodInfo(days=period, start_date=start_date, end_date=end_date),
    )


# ==================== УПРАВЛЕНИЕ КАТЕГОРИЯМИ ====================


def _ensure_slug_free(db: Session, slug: str, exclude_id: Optional[str] = None):
    stmt = select(Category.id).where(Category.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Category with this slug already exists",
        )


@router.get("/categories", response_model=List[CategoryAdminOut])
async def admin_list_categories(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Все категории, включая неактивные, новые первыми."""
    return db.scalars(select(Category).order_by(desc(Category.created_at))).all()


@router.get("/categories/{category_id}", response_model=CategoryAdminOut)
async def admin_get_category(
    category_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _get_or_404(db, Category, category_id, "Category not found")


@router.post(
    "/categories", response_model=CategoryAdminOut, status_code=status.HTTP_201_CREATED
)
async def admin_create_category(
    category_data: CategoryCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Создать новую категорию.

    Slug генерируется из названия, если не передан.

    Raises:
        HTTPException: 409 если slug уже занят
    """
    slug = slugify(category_data.slug or category_data.name)
    if not slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot build slug from name"
        )
    _ensure_slug_free(db, slug)

    category = Category(**category_data.model_dump(exclude={"slug"}), slug=slug)
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Category created: {category.slug}")
    return category


@router.put("/categories/{category_id}", response_model=CategoryAdminOut)
async def admin_update_category(
    category_id: str,
    category_data: CategoryUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Обновить категорию.

    Raises:
        HTTPException: 404 если категория не найдена, 409 если slug занят
    """
    category = _get_or_404(db, Category, category_id, "Category not found")

    slug = slugify(category_data.slug or category_data.name)
    if not slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot build slug from name"
        )
    if slug != category.slug:
        _ensure_slug_free(db, slug, exclude_id=category.id)

    for field, value in category_data.model_dump(exclude={"slug"}).items():
        setattr(category, field, value)
    category.slug = slug

    db.commit()
    db.refresh(category)
    return category


@router.delete("/categories/{category_id}")
async def admin_delete_category(
    category_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Удалить категорию.

    Raises:
        HTTPException: 404 если категория не найдена, 409 если в ней есть товары
    """
    category = _get_or_404(db, Category, category_id, "Category not found")

    products_count = db.scalar(
        select(func.count(Product.id)).where(Product.category_id == category_id)
    ) or 0
    if products_count > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot delete category with {products_count} products",
        )

    db.delete(category)
    db.commit()

    logger.info(f"Category deleted: {category_id}")
    return {"message": "Category deleted successfully"}


# ==================== УПРАВЛЕНИЕ ПРОДУКТАМИ ====================


def generate_sku(name: str) -> str:
    """Артикул из названия: NAME-IN-CAPS-123456 (хвост - миллисекунды)."""
    base = slugify(name).upper() or "PRODUCT"
    return f"{base[:50]}-{str(int(time.time() * 1000))[-6:]}"


def _ensure_category_exists(db: Session, category_id: str):
    if db.get(Category, category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category ID"
        )


def _ensure_sku_free(db: Session, sku: str, exclude_id: Optional[str] = None):
    stmt = select(Product.id).where(Product.sku == sku)
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product with this SKU already exists",
        )


NON_NULLABLE_PRODUCT_FIELDS = (
    "name", "price", "category_id", "sku", "images",
    "stock_quantity", "is_active", "is_featured",
)


@router.get("/products", response_model=dict)
async def admin_list_products(
    category: Optional[str] = Query(None, description="Фильтр по ID категории"),
    search: Optional[str] = Query(None, description="Поиск по названию и артикулу"),
    status_filter: Optional[str] = Query(
        None, alias="status", pattern="^(active|inactive)$", description="active/inactive"
    ),
    paging: PageParams = Depends(),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Получить список товаров для админки, новые первыми.
    """
    stmt = (
        select(Product)
        .join(Product.category)
        .options(contains_eager(Product.category))
    )
    if category:
        stmt = stmt.where(Product.category_id == category)
    if search:
        stmt = stmt.where(
            or_(Product.name.ilike(f"%{search}%"), Product.sku.ilike(f"%{search}%"))
        )
    if status_filter:
        stmt = stmt.where(Product.is_active.is_(status_filter == "active"))

    stmt = stmt.order_by(desc(Product.created_at), Product.id)
    return paginate(db, stmt, paging).render(ProductOut)


@router.get("/products/{product_id}", response_model=ProductOut)
async def admin_get_product(
    product_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Товар для формы редактирования, включая неактивные."""
    return _get_or_404(db, Product, product_id, "Product not found")


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def admin_create_product(
    product_data: ProductCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Создать новый товар.

    Raises:
        HTTPException: 400 если категория не существует, 409 если артикул занят
    """
    _ensure_category_exists(db, product_data.category_id)

    sku = (product_data.sku or "").strip() or generate_sku(product_data.name)
    _ensure_sku_free(db, sku)

    product = Product(**product_data.model_dump(exclude={"sku"}), sku=sku)
    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info(f"Product created: {product.sku}")
    return product


@router.put("/products/{product_id}", response_model=ProductOut)
async def admin_update_product(
    product_id: str,
    product_data: ProductUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Обновить товар. Меняются только переданные поля.

    Raises:
        HTTPException: 404 если товар не найден, 400 если категория
        не существует, 409 если артикул занят другим товаром
    """
    product = _get_or_404(db, Product, product_id, "Product not found")

    data = product_data.model_dump(exclude_unset=True)
    if data.get("category_id") and data["category_id"] != product.category_id:
        _ensure_category_exists(db, data["category_id"])
    if data.get("sku") and data["sku"] != product.sku:
        _ensure_sku_free(db, data["sku"], exclude_id=product.id)

    for field, value in data.items():
        if value is None and field in NON_NULLABLE_PRODUCT_FIELDS:
            continue
        setattr(product, field, value)

    db.commit()
    db.refresh(product)

    logger.info(f"Product updated: {product.sku} ({', '.join(sorted(data))})")
    return product


@router.delete("/products/{product_id}")
async def admin_delete_product(
    product_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Удалить товар.

    Позиции старых заказов сохраняют снимок названия, артикула и цены.
    """
    product = _get_or_404(db, Product, product_id, "Product not found")
    db.delete(product)
    db.commit()

    logger.info(f"Product deleted: {product_id}")
    return {"message": "Product deleted successfully"}


# ==================== УПРАВЛЕНИЕ СЛАЙДАМИ ====================


@router.get("/sliders", response_model=dict)
async def admin_list_sliders(
    status_filter: Optional[str] = Query(
        None, alias="status", pattern="^(active|inactive)$", description="active/inactive"
    ),
    paging: PageParams = Depends(),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Слайды в порядке показа. Total считается с учетом фильтра."""
    stmt = select(Slider)
    if status_filter:
        stmt = stmt.where(Slider.is_active.is_(status_filter == "active"))

    stmt = stmt.order_by(Slider.order_index, Slider.created_at)
    return paginate(db, stmt, paging).render(SliderOut)


@router.get("/sliders/{slider_id}", response_model=SliderOut)
async def admin_get_slider(
    slider_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _get_or_404(db, Slider, slider_id, "Slider not found")


@router.post("/sliders", response_model=SliderOut, status_code=status.HTTP_201_CREATED)
async def admin_create_slider(
    slider_data: SliderCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Создать слайд.

    Без order_index слайд ставится после последнего.
    """
    data = slider_data.model_dump()
    if data["order_index"] is None:
        last_index = db.scalar(select(func.max(Slider.order_index)))
        data["order_index"] = 0 if last_index is None else last_index + 1
    if data["button_text"] is None:
        data["button_text"] = DEFAULT_BUTTON_TEXT

    slider = Slider(**data)
    db.add(slider)
    db.commit()
    db.refresh(slider)
    return slider


@router.put("/sliders/{slider_id}", response_model=SliderOut)
async def admin_update_slider(
    slider_id: str,
    slider_data: SliderUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    slider = _get_or_404(db, Slider, slider_id, "Slider not found")

    data = slider_data.model_dump()
    if data["order_index"] is None:
        data.pop("order_index")
    if data["button_text"] is None:
        data["button_text"] = DEFAULT_BUTTON_TEXT

    for field, value in data.items():
        setattr(slider, field, value)

    db.commit()
    db.refresh(slider)
    return slider


@router.delete("/sliders/{slider_id}")
async def admin_delete_slider(
    slider_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    slider = _get_or_404(db, Slider, slider_id, "Slider not found")
    db.delete(slider)
    db.commit()
    return {"message": "Slider deleted successfully"}


# ==================== РАЙОНЫ ДОСТАВКИ ====================


@router.get("/districts", response_model=List[DistrictOut])
async def admin_list_districts(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return db.scalars(select(District).order_by(District.name)).all()


@router.get("/districts/{district_id}", response_model=DistrictOut)
async def admin_get_district(
    district_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _get_or_404(db, District, district_id, "District not found")


@router.post(
    "/districts", response_model=DistrictOut, status_code=status.HTTP_201_CREATED
)
async def admin_create_district(
    district_data: DistrictCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    district = District(**district_data.model_dump())
    db.add(district)
    db.commit()
    db.refresh(district)
    return district


@router.put("/districts/{district_id}", response_model=DistrictOut)
async def admin_update_district(
    district_id: str,
    district_data: DistrictCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    district = _get_or_404(db, District, district_id, "District not found")
    for field, value in district_data.model_dump().items():
        setattr(district, field, value)
    db.commit()
    db.refresh(district)
    return district


@router.delete("/districts/{district_id}")
async def admin_delete_district(
    district_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    district = _get_or_404(db, District, district_id, "District not found")
    db.delete(district)
    db.commit()
    return {"message": "District deleted successfully"}


# ==================== КЛИЕНТЫ ====================

NON_NULLABLE_CUSTOMER_FIELDS = ("email", "first_name", "last_name", "country", "is_active")


def _ensure_email_free(db: Session, email: str, exclude_id: Optional[str] = None):
    stmt = select(Customer.id).where(func.lower(Customer.email) == email.lower())
    if exclude_id is not None:
        stmt = stmt.where(Customer.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Customer with this email already exists",
        )


@router.get("/customers", response_model=dict)
async def admin_list_customers(
    search: Optional[str] = Query(None, description="Поиск по имени, email, телефону"),
    is_active: Optional[bool] = Query(None, description="Фильтр по активности"),
    start_date: Optional[datetime] = Query(None, description="Создан не раньше"),
    end_date: Optional[datetime] = Query(None, description="Создан не позже"),
    paging: PageParams = Depends(),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Получить список клиентов с фильтрацией и пагинацией.

    Args:
        search: Поисковый запрос
        is_active: Фильтр по активности
        start_date: Начало периода регистрации
        end_date: Конец периода регистрации
        paging: Номер и размер страницы

    Returns:
        Список клиентов с метаданными пагинации
    """
    stmt = select(Customer)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Customer.first_name.ilike(pattern),
                Customer.last_name.ilike(pattern),
                Customer.email.ilike(pattern),
                Customer.phone.ilike(pattern),
            )
        )
    if is_active is not None:
        stmt = stmt.where(Customer.is_active.is_(is_active))
    if start_date is not None:
        stmt = stmt.where(Customer.created_at >= start_date)
    if end_date is not None:
        stmt = stmt.where(Customer.created_at <= end_date)

    stmt = stmt.order_by(desc(Customer.created_at))
    return paginate(db, stmt, paging).render(CustomerOut)


@router.post(
    "/customers", response_model=CustomerOut, status_code=status.HTTP_201_CREATED
)
async def admin_create_customer(
    customer_data: CustomerCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Создать клиента.

    Raises:
        HTTPException: 409 если email уже используется
    """
    _ensure_email_free(db, customer_data.email)

    data = customer_data.model_dump()
    data["country"] = data["country"] or settings.DEFAULT_COUNTRY

    customer = Customer(**data)
    db.add(customer)
    db.commit()
    db.refresh(customer)

    logger.info(f"Customer created: {customer.id}")
    return customer


@router.get("/customers/{customer_id}", response_model=CustomerDetailOut)
async def admin_get_customer(
    customer_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Клиент вместе с историей заказов."""
    customer = db.scalar(
        select(Customer)
        .options(selectinload(Customer.orders))
        .where(Customer.id == customer_id)
    )
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found"
        )
    return customer


@router.patch("/customers/{customer_id}", response_model=CustomerOut)
async def admin_update_customer(
    customer_id: str,
    customer_data: CustomerUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Частично обновить клиента.

    Raises:
        HTTPException: 404 если клиент не найден, 409 если email занят
    """
    customer = _get_or_404(db, Customer, customer_id, "Customer not found")

    data = customer_data.model_dump(exclude_unset=True)
    if data.get("email") and data["email"].lower() != customer.email.lower():
        _ensure_email_free(db, data["email"], exclude_id=customer.id)

    for field, value in data.items():
        # NOT NULL колонки не обнуляются
        if value is None and field in NON_NULLABLE_CUSTOMER_FIELDS:
            continue
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/customers/{customer_id}")
async def admin_delete_customer(
    customer_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Удалить клиента.

    Клиент с заказами не удаляется, а деактивируется.
    """
    customer = _get_or_404(db, Customer, customer_id, "Customer not found")

    orders_count = db.scalar(
        select(func.count(Order.id)).where(Order.customer_id == customer_id)
    ) or 0
    if orders_count > 0:
        customer.is_active = False
        db.commit()
        logger.info(f"Customer {customer_id} deactivated ({orders_count} orders)")
        return {"message": "Customer deactivated", "deactivated": True}

    db.delete(customer)
    db.commit()
    return {"message": "Customer deleted successfully", "deactivated": False}


# ==================== ЗАКАЗЫ ====================


def _load_order(db: Session, order_id: str) -> Order:
    order = db.scalar(
        select(Order)
        .options(selectinload(Order.items), selectinload(Order.customer))
        .where(Order.id == order_id)
    )
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


@router.get("/orders", response_model=dict)
async def admin_list_orders(
    order_status: Optional[str] = Query(None, alias="status", description="Статус заказа"),
    payment_status: Optional[str] = Query(None, description="Статус оплаты"),
    search: Optional[str] = Query(None, description="Номер заказа, имя или email"),
    start_date: Optional[datetime] = Query(None, description="Создан не раньше"),
    end_date: Optional[datetime] = Query(None, description="Создан не позже"),
    paging: PageParams = Depends(),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Получить список заказов, новые первыми.

    Total считается с теми же фильтрами, что и страница.
    """
    stmt = select(Order)
    if order_status:
        stmt = stmt.where(Order.status == order_status)
    if payment_status:
        stmt = stmt.where(Order.payment_status == payment_status)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Order.order_number.ilike(pattern),
                Order.customer_name.ilike(pattern),
                Order.customer_email.ilike(pattern),
            )
        )
    if start_date is not None:
        stmt = stmt.where(Order.created_at >= start_date)
    if end_date is not None:
        stmt = stmt.where(Order.created_at <= end_date)

    stmt = stmt.order_by(desc(Order.created_at), Order.id)
    return paginate(db, stmt, paging).render(OrderOut)


@router.post("/orders", response_model=OrderDetailOut, status_code=status.HTTP_201_CREATED)
async def admin_create_order(
    order_data: OrderCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Оформить заказ.

    Raises:
        HTTPException: 400 для неизвестного района или товара
        и при нехватке остатка
    """
    try:
        order = OrderService(db).place(order_data)
    except OrderError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _load_order(db, order.id)


@router.get("/orders/{order_id}", response_model=OrderDetailOut)
async def admin_get_order(
    order_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Заказ с позициями и карточкой клиента."""
    return _load_order(db, order_id)


@router.patch("/orders/{order_id}", response_model=OrderDetailOut)
async def admin_update_order(
    order_id: str,
    order_data: OrderUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Изменить статус, оплату, комментарий или данные доставки.

    Raises:
        HTTPException: 404 если заказ не найден, 400 для неизвестного статуса
    """
    order = _load_order(db, order_id)
    try:
        return OrderService(db).update(order, order_data)
    except OrderError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/orders/{order_id}")
async def admin_cancel_order(
    order_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Отменить заказ (заказ не удаляется, статус становится cancelled).

    Отменить можно только заказ в статусе pending; товары возвращаются
    на склад.

    Raises:
        HTTPException: 404 если заказ не найден, 400 если заказ уже в работе
    """
    order = _load_order(db, order_id)
    try:
        order = OrderService(db).cancel(order)
    except OrderError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {
        "message": "Order cancelled successfully",
        "order": OrderOut.model_validate(order).model_dump(),
    }


# ==================== ПРОМО-БЛОКИ ====================


@router.get("/promotional-features", response_model=List[PromotionalFeatureOut])
async def admin_list_promotional_features(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Все промо-блоки, включая неактивные, в порядке показа."""
    stmt = select(PromotionalFeature).order_by(
        PromotionalFeature.display_order, PromotionalFeature.created_at
    )
    return db.scalars(stmt).all()


@router.post(
    "/promotional-features",
    response_model=PromotionalFeatureOut,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_promotional_feature(
    feature_data: PromotionalFeatureCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Создать промо-блок. Без display_order блок ставится последним."""
    data = feature_data.model_dump()
    if data["display_order"] is None:
        last = db.scalar(select(func.max(PromotionalFeature.display_order)))
        data["display_order"] = 0 if last is None else last + 1

    feature = PromotionalFeature(**data)
    db.add(feature)
    db.commit()
    db.refresh(feature)
    return feature


@router.put("/promotional-features/{feature_id}", response_model=PromotionalFeatureOut)
async def admin_update_promotional_feature(
    feature_id: str,
    feature_data: PromotionalFeatureUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    feature = _get_or_404(db, PromotionalFeature, feature_id, "Promotional feature not found")

    for field, value in feature_data.model_dump(exclude_unset=True).items():
        if value is None and field in ("title", "is_active", "display_order"):
            continue
        setattr(feature, field, value)

    db.commit()
    db.refresh(feature)
    return feature


@router.delete("/promotional-features/{feature_id}")
async def admin_delete_promotional_feature(
    feature_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    feature = _get_or_404(db, PromotionalFeature, feature_id, "Promotional feature not found")
    db.delete(feature)
    db.commit()
    return {"message": "Promotional feature deleted successfully"}


# ==================== ЗАГРУЗКА ИЗОБРАЖЕНИЙ ====================


@router.post("/uploads", status_code=status.HTTP_201_CREATED)
async def admin_upload_image(
    file: UploadFile = File(...),
    folder: str = Form("uploads"),
    current_user: User = Depends(require_admin),
    storage: StorageProvider = Depends(get_storage_service),
):
    """
    Загрузка изображения через админку.

    Изображение проверяется, оптимизируется в WebP и сохраняется
    в хранилище (локальный диск или S3).

    Returns:
        dict: path и публичный url сохраненного файла

    Raises:
        HTTPException: 400 для невалидного файла, 500 при ошибке хранилища
    """
    content = await file.read()

    is_valid, error_message = image_service.validate_file(file.filename, len(content))
    if not is_valid:
        raise HTTPException(400, detail=error_message)

    try:
        optimized = image_service.optimize(content, file.filename)
    except ImageValidationError as e:
        raise HTTPException(400, detail=str(e))

    path = image_service.generate_path(slugify(folder) or "uploads", optimized.filename)
    if not storage.save_file(path, BytesIO(optimized.data), optimized.mime_type):
        logger.error(f"Upload failed for {file.filename}")
        raise HTTPException(500, detail="Upload failed")

    return {
        "path": path,
        "url": storage.get_file_url(path),
        "size": optimized.size,
        "mime_type": optimized.mime_type,
    }
