from fastapi import APIRouter, Depends, Query, Response
from supabase import Client

from ..dependencies import (
    get_category_repository,
    get_product_repository,
    get_vendor_for_user,
    get_vendor_repository,
    require_catalog_editor,
)
from ..errors import Forbidden, NotFound, ValidationError
from ..money import to_fils
from ..repositories import CategoryRepository, ProductRepository, VendorRepository
from ..repositories.catalog import SORT_OPTIONS
from ..schemas.product import ProductCreate, ProductOut, ProductUpdate
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action

router = APIRouter(prefix="/products", tags=["products"])

MONEY_COLUMNS = {"price": "price_fils", "compare_at_price": "compare_at_price_fils"}


def _to_row(data: dict) -> dict:
    """Maps validated product fields onto table columns (KWD strings -> fils)."""
    row = {}
    for key, value in data.items():
        if key in MONEY_COLUMNS:
            row[MONEY_COLUMNS[key]] = None if value is None else to_fils(value)
        else:
            row[key] = value
    return row


def _check_bundle(products: ProductRepository, bundle_items: list[dict] | None) -> None:
    if not bundle_items:
        return
    ids = [item["product_id"] for item in bundle_items]
    found = {p["id"] for p in products.get_many(ids)}
    missing = [pid for pid in ids if pid not in found]
    if missing:
        raise ValidationError(f"Bundle references unknown product {missing[0]}")


def _owned_product(products: ProductRepository, product_id: str, vendor: dict | None) -> dict:
    product = products.get(product_id)
    if product is None:
        raise NotFound("Product not found")
    # vendor is None for admins
    if vendor is not None and product["vendor_id"] != vendor["id"]:
        raise Forbidden("You can only manage products from your own store")
    return product


@router.get("", response_model=list[ProductOut])
def list_products(
    category_id: str | None = Query(None, alias="categoryId"),
    vendor_id: str | None = Query(None, alias="vendorId"),
    search: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy", description="price_asc, price_desc or newest"),
    products: ProductRepository = Depends(get_product_repository),
):
    """List products, optionally filtered by category, vendor and a name/brand search."""
    if sort_by and sort_by not in SORT_OPTIONS:
        raise ValidationError(f"Unknown sort option: {sort_by}")
    return products.search(category_id=category_id, vendor_id=vendor_id, search=search, sort_by=sort_by)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, products: ProductRepository = Depends(get_product_repository)):
    product = products.get(product_id)
    if not product:
        raise NotFound("Product not found")
    return product


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    user=Depends(require_catalog_editor),
    vendor: dict | None = Depends(get_vendor_for_user),
    products: ProductRepository = Depends(get_product_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
    supabase: Client = Depends(get_supabase_client),
):
    """Create a product. Vendors always create under their own store."""
    data = payload.model_dump()
    if vendor is not None:
        data["vendor_id"] = vendor["id"]
    elif not data.get("vendor_id") or vendors.get(data["vendor_id"]) is None:
        raise ValidationError("A valid vendorId is required")

    if categories.get(data["category_id"]) is None:
        raise NotFound("Category not found")
    _check_bundle(products, data["bundle_items"])

    new_product = products.insert(_to_row(data))
    log_action(supabase, user, "create_product", "product", new_product["id"], {"name": new_product["name"]})
    return new_product


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    user=Depends(require_catalog_editor),
    vendor: dict | None = Depends(get_vendor_for_user),
    products: ProductRepository = Depends(get_product_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    supabase: Client = Depends(get_supabase_client),
):
    """Update a product. Vendors can only update their own products."""
    _owned_product(products, product_id, vendor)

    update_data = payload.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No fields to update")
    if update_data.get("category_id") and categories.get(update_data["category_id"]) is None:
        raise NotFound("Category not found")
    _check_bundle(products, update_data.get("bundle_items"))

    updated = products.update(product_id, _to_row(update_data))
    log_action(supabase, user, "update_product", "product", product_id, update_data)
    return updated


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: str,
    user=Depends(require_catalog_editor),
    vendor: dict | None = Depends(get_vendor_for_user),
    products: ProductRepository = Depends(get_product_repository),
    supabase: Client = Depends(get_supabase_client),
):
    """
    Delete a product. Cart lines and order items that reference it are kept;
    carts show such lines as unavailable.
    """
    _owned_product(products, product_id, vendor)
    products.delete(product_id)
    log_action(supabase, user, "delete_product", "product", product_id)
    return Response(status_code=204)
