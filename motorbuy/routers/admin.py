from collections import defaultdict

from fastapi import APIRouter, Depends, Response
from supabase import Client

from ..dependencies import (
    get_category_repository,
    get_checkout_service,
    get_commission_service,
    get_order_repository,
    get_payout_service,
    get_product_repository,
    get_user_repository,
    get_vendor_repository,
    require_admin,
)
from ..errors import NotFound
from ..repositories import (
    CategoryRepository,
    OrderRepository,
    ProductRepository,
    UserRepository,
    VendorRepository,
)
from ..schemas.admin import AdminAnalytics, AdminUser, RoleUpdate
from ..schemas.order import OrderOut, OrderStatusUpdate
from ..schemas.payout import PaymentRequestOut, PayoutRejection, PayoutResult
from ..schemas.vendor import CommissionUpdate, VendorApproval, VendorFinancialOut, VendorOut
from ..services import CheckoutService, CommissionService, PayoutService
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

RECENT_ORDERS = 10


# Orders


@router.get("/orders", response_model=list[OrderOut])
def list_all_orders(
    orders: OrderRepository = Depends(get_order_repository),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    return checkout.with_items(orders.list_all())


@router.patch("/orders/{order_id}", response_model=OrderOut)
def update_order(
    order_id: str,
    payload: OrderStatusUpdate,
    user=Depends(require_admin),
    checkout: CheckoutService = Depends(get_checkout_service),
    supabase: Client = Depends(get_supabase_client),
):
    checkout.set_status(order_id, payload.status)
    log_action(supabase, user, f"set_order_status_{payload.status}", "order", order_id)
    return checkout.get_order(order_id)


@router.delete("/orders/{order_id}", status_code=204)
def delete_order(
    order_id: str,
    user=Depends(require_admin),
    checkout: CheckoutService = Depends(get_checkout_service),
    supabase: Client = Depends(get_supabase_client),
):
    checkout.delete_order(order_id)
    log_action(supabase, user, "delete_order", "order", order_id)
    return Response(status_code=204)


# Vendors and payouts


@router.get("/vendors/financials", response_model=list[VendorFinancialOut])
def vendor_financials(payouts: PayoutService = Depends(get_payout_service)):
    return payouts.financials()


@router.patch("/vendors/{vendor_id}/approve", response_model=VendorOut)
def approve_vendor(
    vendor_id: str,
    payload: VendorApproval,
    user=Depends(require_admin),
    vendors: VendorRepository = Depends(get_vendor_repository),
    supabase: Client = Depends(get_supabase_client),
):
    if vendors.get(vendor_id) is None:
        raise NotFound("Vendor not found")
    vendor = vendors.update(vendor_id, {"is_approved": payload.is_approved})
    action = "approve_vendor" if payload.is_approved else "unapprove_vendor"
    log_action(supabase, user, action, "vendor", vendor_id)
    return vendor


@router.patch("/vendors/{vendor_id}/commission", response_model=VendorOut)
def set_vendor_commission(
    vendor_id: str,
    payload: CommissionUpdate,
    user=Depends(require_admin),
    commission: CommissionService = Depends(get_commission_service),
    supabase: Client = Depends(get_supabase_client),
):
    """Change a vendor's commission policy. Past accruals are not recomputed."""
    vendor = commission.set_policy(vendor_id, payload.commission_type, payload.commission_value)
    log_action(
        supabase, user, "set_commission", "vendor", vendor_id,
        {"commission_type": vendor["commission_type"], "commission_value": vendor["commission_value"]},
    )
    return vendor


@router.post("/vendors/{vendor_id}/payout", response_model=PayoutResult)
def process_vendor_payout(
    vendor_id: str,
    user=Depends(require_admin),
    payouts: PayoutService = Depends(get_payout_service),
    supabase: Client = Depends(get_supabase_client),
):
    """Pay out the vendor's whole pending balance and close all its open requests."""
    result = payouts.admin_process_payout(vendor_id, user["id"])
    log_action(supabase, user, "process_payout", "vendor", vendor_id, result)
    return {"message": "Payout processed", **result}


@router.get("/payout-requests", response_model=list[PaymentRequestOut])
def list_payout_requests(payouts: PayoutService = Depends(get_payout_service)):
    """Requests still waiting for an admin: pending and approved."""
    return payouts.open_requests()


@router.post("/payout-requests/{request_id}/approve", response_model=PaymentRequestOut)
def approve_payout_request(
    request_id: str,
    user=Depends(require_admin),
    payouts: PayoutService = Depends(get_payout_service),
    supabase: Client = Depends(get_supabase_client),
):
    request = payouts.approve_request(request_id, user["id"])
    log_action(supabase, user, "approve_payout_request", "payment_request", request_id)
    return request


@router.post("/payout-requests/{request_id}/pay", response_model=PaymentRequestOut)
def pay_payout_request(
    request_id: str,
    user=Depends(require_admin),
    payouts: PayoutService = Depends(get_payout_service),
    supabase: Client = Depends(get_supabase_client),
):
    request = payouts.pay_request(request_id, user["id"])
    log_action(supabase, user, "pay_payout_request", "payment_request", request_id)
    return request


@router.post("/payout-requests/{request_id}/reject", response_model=PaymentRequestOut)
def reject_payout_request(
    request_id: str,
    payload: PayoutRejection,
    user=Depends(require_admin),
    payouts: PayoutService = Depends(get_payout_service),
    supabase: Client = Depends(get_supabase_client),
):
    request = payouts.reject_request(request_id, user["id"], payload.notes)
    log_action(supabase, user, "reject_payout_request", "payment_request", request_id, {"notes": payload.notes})
    return request


# Users


@router.get("/users", response_model=list[AdminUser])
def list_users(users: UserRepository = Depends(get_user_repository)):
    return users.list_all()


@router.patch("/users/{user_id}/role", response_model=AdminUser)
def set_user_role(
    user_id: str,
    payload: RoleUpdate,
    user=Depends(require_admin),
    users: UserRepository = Depends(get_user_repository),
    supabase: Client = Depends(get_supabase_client),
):
    if users.get(user_id) is None:
        raise NotFound("User not found")
    updated = users.set_role(user_id, payload.role)
    log_action(supabase, user, "set_role", "user", user_id, {"role": payload.role})
    return updated


# Analytics


def _buckets(revenue: dict, units: dict, names: dict) -> list[dict]:
    buckets = [
        {
            "id": key,
            "name": names.get(key, "Unknown"),
            "revenue_fils": revenue[key],
            "units": units[key],
        }
        for key in revenue
    ]
    buckets.sort(key=lambda b: b["revenue_fils"], reverse=True)
    return buckets


@router.get("/analytics", response_model=AdminAnalytics)
def get_analytics(
    orders: OrderRepository = Depends(get_order_repository),
    products: ProductRepository = Depends(get_product_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    users: UserRepository = Depends(get_user_repository),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    all_orders = orders.list_all()
    all_products = products.search()
    all_vendors = vendors.list_all()
    all_categories = categories.list_all()

    product_category = {p["id"]: p["category_id"] for p in all_products}
    vendor_names = {v["id"]: v["store_name"] for v in all_vendors}
    category_names = {c["id"]: c["name"] for c in all_categories}

    category_revenue, category_units = defaultdict(int), defaultdict(int)
    vendor_revenue, vendor_units = defaultdict(int), defaultdict(int)
    for item in orders.all_items():
        line_total = item["price_fils"] * item["quantity"]
        vendor_revenue[item["vendor_id"]] += line_total
        vendor_units[item["vendor_id"]] += item["quantity"]
        # Items of deleted products can no longer be placed in a category
        category_id = product_category.get(item["product_id"])
        if category_id:
            category_revenue[category_id] += line_total
            category_units[category_id] += item["quantity"]

    return {
        "total_revenue_fils": sum(o["total_fils"] for o in all_orders),
        "total_orders": len(all_orders),
        "total_products": len(all_products),
        "total_users": len(users.list_all()),
        "total_vendors": len(all_vendors),
        "total_categories": len(all_categories),
        "sales_by_category": _buckets(category_revenue, category_units, category_names),
        "sales_by_vendor": _buckets(vendor_revenue, vendor_units, vendor_names),
        "recent_orders": checkout.with_items(all_orders[:RECENT_ORDERS]),
    }
