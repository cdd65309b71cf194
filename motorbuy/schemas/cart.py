from typing import Optional

from .base import ApiModel
from .product import ProductOut


class CartItemAdd(ApiModel):
    product_id: str
    quantity: int = 1


class CartItemUpdate(ApiModel):
    quantity: int


class CartItemOut(ApiModel):
    id: str
    user_id: str
    product_id: str
    quantity: int


class CartLineOut(CartItemOut):
    # None once the product has been deleted from the catalog
    product: Optional[ProductOut] = None
    available: bool = True
