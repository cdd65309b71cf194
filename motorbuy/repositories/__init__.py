from .base import SupabaseRepository, first_row, is_uuid
from .carts import CartRepository
from .catalog import CategoryRepository, ProductRepository
from .orders import OrderRepository
from .payouts import PaymentRequestRepository
from .users import AuditRepository, StoryRepository, UserRepository
from .vendors import VendorRepository

__all__ = [
    "SupabaseRepository",
    "first_row",
    "is_uuid",
    "AuditRepository",
    "CartRepository",
    "CategoryRepository",
    "OrderRepository",
    "PaymentRequestRepository",
    "ProductRepository",
    "StoryRepository",
    "UserRepository",
    "VendorRepository",
]
