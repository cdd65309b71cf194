import logging

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from .errors import Forbidden, NotFound, Unauthorized
from .repositories import (
    AuditRepository,
    CartRepository,
    CategoryRepository,
    OrderRepository,
    PaymentRequestRepository,
    ProductRepository,
    StoryRepository,
    UserRepository,
    VendorRepository,
)
from .services import CartService, CheckoutService, CommissionService, PayoutService
from .supabase_client import get_supabase_client

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _resolve_user(credentials: HTTPAuthorizationCredentials | None, supabase: Client) -> dict | None:
    if credentials is None:
        return None

    try:
        user_response = supabase.auth.get_user(credentials.credentials)
    except Exception:  # pragma: no cover - passthrough
        logger.info("Rejected bearer token", exc_info=True)
        return None

    if not user_response or not user_response.user:
        return None

    supa_user = user_response.user
    # The profile row's role is the single source of truth for authorization
    profile = UserRepository(supabase).get(supa_user.id) or {}

    return {
        "id": supa_user.id,
        "email": profile.get("email") or supa_user.email,
        "phone": profile.get("phone") or supa_user.phone,
        "name": profile.get("full_name") or (supa_user.user_metadata or {}).get("name") or "",
        "role": profile.get("role") or "customer",
    }


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    supabase: Client = Depends(get_supabase_client),
):
    """
    Validates the incoming Supabase access token and returns the user object.
    """
    if credentials is None:
        raise Unauthorized("Missing authorization header")
    user = _resolve_user(credentials, supabase)
    if user is None:
        raise Unauthorized("Session expired. Please sign in again.")
    return user


def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
    supabase: Client = Depends(get_supabase_client),
):
    """
    Returns the user object if authenticated, otherwise returns None.
    Does NOT raise 401.
    """
    return _resolve_user(credentials, supabase)


def require_admin(user=Depends(get_current_user)):
    if user.get("role") != "admin":
        raise Forbidden("Admin privileges required")
    return user


def require_vendor(user=Depends(get_current_user)):
    if user.get("role") != "vendor":
        raise Forbidden("Vendor privileges required")
    return user


def require_catalog_editor(user=Depends(get_current_user)):
    """Vendors manage their own products, admins manage everything."""
    if user.get("role") not in ("vendor", "admin"):
        raise Forbidden("Only vendors can manage products")
    return user


# Repositories and services


def get_vendor_repository(supabase: Client = Depends(get_supabase_client)) -> VendorRepository:
    return VendorRepository(supabase)


def get_product_repository(supabase: Client = Depends(get_supabase_client)) -> ProductRepository:
    return ProductRepository(supabase)


def get_category_repository(supabase: Client = Depends(get_supabase_client)) -> CategoryRepository:
    return CategoryRepository(supabase)


def get_order_repository(supabase: Client = Depends(get_supabase_client)) -> OrderRepository:
    return OrderRepository(supabase)


def get_user_repository(supabase: Client = Depends(get_supabase_client)) -> UserRepository:
    return UserRepository(supabase)


def get_story_repository(supabase: Client = Depends(get_supabase_client)) -> StoryRepository:
    return StoryRepository(supabase)


def get_audit_repository(supabase: Client = Depends(get_supabase_client)) -> AuditRepository:
    return AuditRepository(supabase)


def get_cart_service(supabase: Client = Depends(get_supabase_client)) -> CartService:
    return CartService(CartRepository(supabase), ProductRepository(supabase))


def get_commission_service(supabase: Client = Depends(get_supabase_client)) -> CommissionService:
    return CommissionService(VendorRepository(supabase))


def get_checkout_service(supabase: Client = Depends(get_supabase_client)) -> CheckoutService:
    return CheckoutService(
        OrderRepository(supabase),
        CartRepository(supabase),
        ProductRepository(supabase),
        CommissionService(VendorRepository(supabase)),
    )


def get_payout_service(supabase: Client = Depends(get_supabase_client)) -> PayoutService:
    return PayoutService(VendorRepository(supabase), PaymentRequestRepository(supabase))


def get_current_vendor(
    user=Depends(require_vendor),
    vendors: VendorRepository = Depends(get_vendor_repository),
) -> dict:
    """
    Gets the vendor record owned by the current vendor user.
    """
    vendor = vendors.get_by_user(user["id"])
    if vendor is None:
        raise NotFound("Vendor profile not found")
    return vendor


def get_vendor_for_user(
    user=Depends(require_catalog_editor),
    vendors: VendorRepository = Depends(get_vendor_repository),
) -> dict | None:
    """
    Vendor record for a vendor user; None for admins, who may act on any vendor.
    """
    if user.get("role") == "admin":
        return None
    vendor = vendors.get_by_user(user["id"])
    if vendor is None:
        raise Forbidden("Vendor profile required")
    return vendor
