from .base import SupabaseRepository, first_row, is_uuid

SORT_OPTIONS = {
    "price_asc": ("price_fils", False),
    "price_desc": ("price_fils", True),
    "newest": ("created_at", True),
}

# Characters with meaning inside a PostgREST or=() filter
_FILTER_RESERVED = str.maketrans("", "", ",()")


class CategoryRepository(SupabaseRepository):
    table_name = "categories"

    def list_all(self) -> list[dict]:
        return self.table.select("*").order("name").execute().data or []

    def get_by_slug(self, slug: str) -> dict | None:
        return first_row(self.table.select("*").eq("slug", slug).limit(1).execute())


class ProductRepository(SupabaseRepository):
    table_name = "products"

    def search(
        self,
        category_id: str | None = None,
        vendor_id: str | None = None,
        search: str | None = None,
        sort_by: str | None = None,
    ) -> list[dict]:
        if any(value and not is_uuid(value) for value in (category_id, vendor_id)):
            return []
        query = self.table.select("*")
        if category_id:
            query = query.eq("category_id", category_id)
        if vendor_id:
            query = query.eq("vendor_id", vendor_id)
        if search:
            term = search.translate(_FILTER_RESERVED).strip()
            if term:
                query = query.or_(f"name.ilike.%{term}%,brand.ilike.%{term}%")
        if sort_by:
            column, desc = SORT_OPTIONS[sort_by]
            query = query.order(column, desc=desc)
        return query.execute().data or []

    def list_for_vendor(self, vendor_id: str) -> list[dict]:
        return self.search(vendor_id=vendor_id, sort_by="newest")
