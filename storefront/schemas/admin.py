"""
Pydantic схемы для административной панели.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# ==================== ПОЛЬЗОВАТЕЛИ ====================


class UserOut(BaseModel):
    """Схема для вывода пользователя."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: str
    full_name: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class RoleUpdate(BaseModel):
    """Схема для смены роли пользователя."""

    role: str = Field(..., description="user или admin")


# ==================== АУТЕНТИФИКАЦИЯ ====================


class LoginRequest(BaseModel):
    """Схема для входа в систему."""

    username: str = Field(..., description="Username или email")
    password: str = Field(..., description="Пароль")


class LoginResponse(BaseModel):
    """Схема ответа при входе в систему."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


# ==================== СТАТИСТИКА ====================


class StatusSplit(BaseModel):
    active: int = 0
    inactive: int = 0


class OverviewStats(BaseModel):
    total_categories: int
    total_products: int
    total_sliders: int
    recent_products_count: int
    recent_categories_count: int


class InventoryStats(BaseModel):
    total_stock: int
    low_stock_count: int
    out_of_stock_count: int


class PricingStats(BaseModel):
    average_price: float
    highest_price: float
    lowest_price: float


class RecentProduct(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    sku: str
    price: float
    stock_quantity: int
    created_at: Optional[datetime] = None


class ProductDashboardStats(BaseModel):
    by_status: StatusSplit
    inventory: InventoryStats
    pricing: PricingStats
    recent: List[RecentProduct]


class CategoryProductCount(BaseModel):
    id: str
    name: str
    slug: str
    product_count: int


class OrderDashboardStats(BaseModel):
    total: int
    pending: int
    recent: int
    by_status: Dict[str, int]
    total_customers: int


class PeriodInfo(BaseModel):
    days: int
    start_date: datetime
    end_date: datetime


class DashboardStats(BaseModel):
    """Общая статистика дашборда."""

    overview: OverviewStats
    products: ProductDashboardStats
    categories: List[CategoryProductCount]
    sliders: StatusSplit
    orders: OrderDashboardStats
    districts: StatusSplit
    promotional_features: StatusSplit
    period: PeriodInfo
