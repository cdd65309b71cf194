from fastapi import APIRouter, Depends
from supabase import Client

from ..dependencies import (
    get_checkout_service,
    get_current_user,
    get_order_repository,
    require_admin,
)
from ..errors import Forbidden
from ..repositories import OrderRepository
from ..schemas.order import GuestCheckout, OrderOut, OrderStatusUpdate
from ..services import CheckoutService
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=list[OrderOut])
def list_orders(
    user=Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Order history of the current user, newest first."""
    return checkout.with_items(orders.list_for_user(user["id"]))


@router.post("", response_model=OrderOut, status_code=201)
def create_order(user=Depends(get_current_user), checkout: CheckoutService = Depends(get_checkout_service)):
    """Checkout the current user's server-side cart."""
    return checkout.get_order(checkout.checkout(user["id"])["id"])


@router.post("/guest", response_model=OrderOut, status_code=201)
def create_guest_order(payload: GuestCheckout, checkout: CheckoutService = Depends(get_checkout_service)):
    """Checkout for visitors whose cart lives in the browser."""
    order = checkout.checkout_guest(
        [item.model_dump() for item in payload.items],
        email=payload.guest_email,
        name=payload.guest_name,
        phone=payload.guest_phone,
    )
    return checkout.get_order(order["id"])


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user=Depends(get_current_user),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    order = checkout.get_order(order_id)
    if order["user_id"] != user["id"] and user.get("role") != "admin":
        raise Forbidden("Not allowed")
    return order


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    user=Depends(require_admin),
    checkout: CheckoutService = Depends(get_checkout_service),
    supabase: Client = Depends(get_supabase_client),
):
    checkout.set_status(order_id, payload.status)
    log_action(supabase, user, f"set_order_status_{payload.status}", "order", order_id)
    return checkout.get_order(order_id)
