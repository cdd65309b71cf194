from fastapi import APIRouter, Depends
from supabase import Client

from ..dependencies import (
    get_checkout_service,
    get_current_vendor,
    get_payout_service,
    get_vendor_repository,
    require_vendor,
)
from ..errors import ValidationError
from ..repositories import VendorRepository
from ..schemas.order import OrderOut
from ..schemas.payout import PaymentRequestOut
from ..schemas.vendor import LedgerEntryOut, VendorOut, VendorUpdate, VendorWalletOut
from ..services import CheckoutService, PayoutService
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action

router = APIRouter(prefix="/vendor", tags=["vendor account"])


@router.get("/me", response_model=VendorOut)
def get_my_vendor(vendor=Depends(get_current_vendor)):
    return vendor


@router.patch("/me", response_model=VendorOut)
def update_my_vendor(
    payload: VendorUpdate,
    user=Depends(require_vendor),
    vendor=Depends(get_current_vendor),
    vendors: VendorRepository = Depends(get_vendor_repository),
    supabase: Client = Depends(get_supabase_client),
):
    """Store profile edits. Balances, approval and commission are not editable here."""
    update_data = payload.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No fields to update")
    updated = vendors.update(vendor["id"], update_data)
    log_action(supabase, user, "update_vendor", "vendor", vendor["id"], update_data)
    return updated


@router.get("/orders", response_model=list[OrderOut])
def get_vendor_orders(vendor=Depends(get_current_vendor), checkout: CheckoutService = Depends(get_checkout_service)):
    """Orders containing this vendor's products, showing only its own lines."""
    return checkout.orders_for_vendor(vendor["id"])


@router.get("/wallet", response_model=VendorWalletOut)
def get_wallet(vendor=Depends(get_current_vendor), payouts: PayoutService = Depends(get_payout_service)):
    return payouts.wallet(vendor)


@router.post("/wallet/request", response_model=PaymentRequestOut, status_code=201)
def request_payout(
    user=Depends(require_vendor),
    vendor=Depends(get_current_vendor),
    payouts: PayoutService = Depends(get_payout_service),
    supabase: Client = Depends(get_supabase_client),
):
    """Request withdrawal of the whole pending balance."""
    request = payouts.request_payout(vendor["id"])
    log_action(
        supabase, user, "request_payout", "payment_request", request["id"],
        {"amount_fils": request["amount_fils"]},
    )
    return request


@router.get("/wallet/ledger", response_model=list[LedgerEntryOut])
def get_ledger(vendor=Depends(get_current_vendor), vendors: VendorRepository = Depends(get_vendor_repository)):
    """Every accrual and settlement that touched this vendor's balance."""
    return vendors.ledger(vendor["id"])
