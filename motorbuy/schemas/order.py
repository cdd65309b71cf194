from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from .base import ApiModel


class OrderItemOut(ApiModel):
    money_fields = {"price": "price_fils"}

    id: str
    order_id: str
    product_id: str
    vendor_id: str
    quantity: int
    price: str


class OrderOut(ApiModel):
    money_fields = {"total": "total_fils"}

    id: str
    user_id: str
    guest_email: Optional[str] = None
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    status: str
    total: str
    items: list[OrderItemOut] = []
    created_at: Optional[datetime] = None


class GuestOrderItem(ApiModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class GuestCheckout(ApiModel):
    items: list[GuestOrderItem]
    guest_email: EmailStr
    guest_name: str = Field(..., min_length=1)
    guest_phone: str = Field(..., min_length=1)


class OrderStatusUpdate(ApiModel):
    status: str
