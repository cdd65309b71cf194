from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import ApiModel, KwdAmount, reject_null


class BundleItem(ApiModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class ProductCreate(ApiModel):
    # Only honoured for admins; vendors always create under their own store
    vendor_id: Optional[str] = None
    category_id: str
    name: str = Field(..., max_length=200)
    description: str
    price: KwdAmount
    compare_at_price: Optional[KwdAmount] = None
    stock: int = Field(0, ge=0)
    brand: str
    images: list[str] = []
    warranty_info: Optional[str] = None
    bundle_items: list[BundleItem] = []


class ProductUpdate(ApiModel):
    category_id: Optional[str] = None
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    price: Optional[KwdAmount] = None
    compare_at_price: Optional[KwdAmount] = None
    stock: Optional[int] = Field(None, ge=0)
    brand: Optional[str] = None
    images: Optional[list[str]] = None
    warranty_info: Optional[str] = None
    bundle_items: Optional[list[BundleItem]] = None

    @field_validator("category_id", "name", "description", "price", "stock", "brand", "images", "bundle_items")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class ProductOut(ApiModel):
    money_fields = {"price": "price_fils", "compare_at_price": "compare_at_price_fils"}

    id: str
    vendor_id: str
    category_id: str
    name: str
    description: str
    price: str
    compare_at_price: Optional[str] = None
    stock: int = 0
    brand: str
    images: list[str] = []
    warranty_info: Optional[str] = None
    bundle_items: list[BundleItem] = []
    created_at: Optional[datetime] = None


class CategoryCreate(ApiModel):
    name: str = Field(..., max_length=100)
    slug: str = Field(..., max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    image_url: Optional[str] = None
    icon: Optional[str] = None


class CategoryUpdate(ApiModel):
    name: Optional[str] = Field(None, max_length=100)
    slug: Optional[str] = Field(None, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    image_url: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name", "slug")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class CategoryOut(ApiModel):
    id: str
    name: str
    slug: str
    image_url: Optional[str] = None
    icon: Optional[str] = None
