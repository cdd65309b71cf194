from fastapi import APIRouter, Depends, Response
from supabase import Client

from ..dependencies import get_category_repository, require_admin
from ..errors import NotFound, ValidationError
from ..repositories import CategoryRepository
from ..schemas.product import CategoryCreate, CategoryOut, CategoryUpdate
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryOut])
def list_categories(categories: CategoryRepository = Depends(get_category_repository)):
    return categories.list_all()


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryCreate,
    user=Depends(require_admin),
    categories: CategoryRepository = Depends(get_category_repository),
    supabase: Client = Depends(get_supabase_client),
):
    if categories.get_by_slug(payload.slug):
        raise ValidationError("A category with this slug already exists")
    category = categories.insert(payload.model_dump())
    log_action(supabase, user, "create_category", "category", category["id"], {"slug": category["slug"]})
    return category


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    user=Depends(require_admin),
    categories: CategoryRepository = Depends(get_category_repository),
    supabase: Client = Depends(get_supabase_client),
):
    if categories.get(category_id) is None:
        raise NotFound("Category not found")
    update_data = payload.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No fields to update")
    if "slug" in update_data:
        clash = categories.get_by_slug(update_data["slug"])
        if clash and clash["id"] != category_id:
            raise ValidationError("A category with this slug already exists")

    category = categories.update(category_id, update_data)
    log_action(supabase, user, "update_category", "category", category_id, update_data)
    return category


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: str,
    user=Depends(require_admin),
    categories: CategoryRepository = Depends(get_category_repository),
    supabase: Client = Depends(get_supabase_client),
):
    if categories.get(category_id) is None:
        raise NotFound("Category not found")
    categories.delete(category_id)
    log_action(supabase, user, "delete_category", "category", category_id)
    return Response(status_code=204)
