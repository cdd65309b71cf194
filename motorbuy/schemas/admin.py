from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from .base import ApiModel
from .order import OrderOut


class SalesBucket(ApiModel):
    money_fields = {"revenue": "revenue_fils"}

    id: str
    name: str
    revenue: str
    units: int


class AdminAnalytics(ApiModel):
    money_fields = {"total_revenue": "total_revenue_fils"}

    total_revenue: str
    total_orders: int
    total_products: int
    total_users: int
    total_vendors: int
    total_categories: int
    sales_by_category: list[SalesBucket] = []
    sales_by_vendor: list[SalesBucket] = []
    recent_orders: list[OrderOut] = []


class AdminUser(ApiModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: str = "customer"
    created_at: Optional[datetime] = None


class RoleUpdate(BaseModel):
    role: Literal["customer", "vendor", "admin"]
