from fastapi import APIRouter, Depends, Response

from ..dependencies import get_cart_service, get_current_user
from ..schemas.cart import CartItemAdd, CartItemOut, CartItemUpdate, CartLineOut
from ..services import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=list[CartLineOut])
def get_cart(user=Depends(get_current_user), cart: CartService = Depends(get_cart_service)):
    return cart.get_cart(user["id"])


@router.post("", response_model=CartItemOut, status_code=201)
def add_to_cart(
    payload: CartItemAdd,
    user=Depends(get_current_user),
    cart: CartService = Depends(get_cart_service),
):
    return cart.add_item(user["id"], payload.product_id, payload.quantity)


@router.patch("/{item_id}", response_model=CartItemOut)
def update_cart_item(
    item_id: str,
    payload: CartItemUpdate,
    user=Depends(get_current_user),
    cart: CartService = Depends(get_cart_service),
):
    return cart.set_quantity(user["id"], item_id, payload.quantity)


@router.delete("/{item_id}", status_code=204)
def remove_cart_item(item_id: str, user=Depends(get_current_user), cart: CartService = Depends(get_cart_service)):
    cart.remove_item(user["id"], item_id)
    return Response(status_code=204)


@router.delete("", status_code=204)
def clear_cart(user=Depends(get_current_user), cart: CartService = Depends(get_cart_service)):
    cart.clear(user["id"])
    return Response(status_code=204)
