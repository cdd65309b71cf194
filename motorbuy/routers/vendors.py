from fastapi import APIRouter, Depends
from supabase import Client

from ..config import get_settings
from ..dependencies import (
    get_current_user,
    get_current_user_optional,
    get_product_repository,
    get_user_repository,
    get_vendor_repository,
)
from ..errors import Forbidden, NotFound, ValidationError
from ..repositories import ProductRepository, UserRepository, VendorRepository
from ..schemas.product import ProductOut
from ..schemas.vendor import VendorCreate, VendorOut, VendorPublicOut
from ..services.commission import parse_policy
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action

router = APIRouter(prefix="/vendors", tags=["vendors"])


def _visible_vendor(vendors: VendorRepository, vendor_id: str, user: dict | None) -> dict:
    vendor = vendors.get(vendor_id)
    if vendor is None:
        raise NotFound("Vendor not found")
    # Unapproved stores are hidden from everyone except their owner and admins
    if not vendor.get("is_approved"):
        is_owner = user is not None and user["id"] == vendor["user_id"]
        if not is_owner and (user is None or user.get("role") != "admin"):
            raise NotFound("Vendor not found")
    return vendor


@router.get("", response_model=list[VendorPublicOut])
def list_vendors(
    user=Depends(get_current_user_optional),
    vendors: VendorRepository = Depends(get_vendor_repository),
):
    """List vendors. Only approved stores are listed unless the caller is an admin."""
    is_admin = user is not None and user.get("role") == "admin"
    return vendors.list_all(approved_only=not is_admin)


@router.get("/{vendor_id}", response_model=VendorPublicOut)
def get_vendor(
    vendor_id: str,
    user=Depends(get_current_user_optional),
    vendors: VendorRepository = Depends(get_vendor_repository),
):
    return _visible_vendor(vendors, vendor_id, user)


@router.get("/{vendor_id}/products", response_model=list[ProductOut])
def get_vendor_products(
    vendor_id: str,
    user=Depends(get_current_user_optional),
    vendors: VendorRepository = Depends(get_vendor_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    """Storefront: every product of one vendor, newest first."""
    _visible_vendor(vendors, vendor_id, user)
    return products.list_for_vendor(vendor_id)


@router.post("", response_model=VendorOut, status_code=201)
def become_vendor(
    payload: VendorCreate,
    user=Depends(get_current_user),
    vendors: VendorRepository = Depends(get_vendor_repository),
    users: UserRepository = Depends(get_user_repository),
    supabase: Client = Depends(get_supabase_client),
):
    """
    Open a store for the current user. The store starts unapproved with the
    default commission policy and zero balances, and the user becomes a vendor.
    """
    if user.get("role") == "admin":
        raise Forbidden("Admins cannot open a store")
    if vendors.get_by_user(user["id"]):
        raise ValidationError("You already have a store")

    settings = get_settings()
    policy = parse_policy(settings.DEFAULT_COMMISSION_TYPE, settings.DEFAULT_COMMISSION_VALUE)
    vendor = vendors.insert(
        {
            **payload.model_dump(),
            "user_id": user["id"],
            "is_approved": False,
            "commission_type": policy.type,
            "commission_value": policy.value_str,
            "gross_sales_fils": 0,
            "pending_payout_fils": 0,
            "lifetime_payouts_fils": 0,
        }
    )
    users.set_role(user["id"], "vendor")
    log_action(supabase, user, "create_vendor", "vendor", vendor["id"], {"store_name": vendor["store_name"]})
    return vendor
