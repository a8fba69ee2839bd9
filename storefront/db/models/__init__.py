"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .base import Base
from .category import Category
from .customer import Customer
from .district import District
from .order import Order, OrderItem
from .product import Product
from .promotional_feature import PromotionalFeature
from .slider import Slider
from .user import User

__all__ = [
    "Base",
    "Category",
    "Customer",
    "District",
    "Order",
    "OrderItem",
    "Product",
    "PromotionalFeature",
    "Slider",
    "User",
]
