from .base import SupabaseRepository, first_row


class OrderRepository(SupabaseRepository):
    table_name = "orders"

    def list_for_user(self, user_id: str) -> list[dict]:
        return (
            self.table.select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )

    def list_all(self) -> list[dict]:
        return self.table.select("*").order("created_at", desc=True).execute().data or []

    def list_by_ids(self, order_ids) -> list[dict]:
        order_ids = list(dict.fromkeys(order_ids))
        if not order_ids:
            return []
        return (
            self.table.select("*")
            .in_("id", order_ids)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )

    def items_for(self, order_ids) -> list[dict]:
        order_ids = list(dict.fromkeys(order_ids))
        if not order_ids:
            return []
        return self.supabase.table("order_items").select("*").in_("order_id", order_ids).execute().data or []

    def items_for_vendor(self, vendor_id: str) -> list[dict]:
        return self.supabase.table("order_items").select("*").eq("vendor_id", vendor_id).execute().data or []

    def all_items(self) -> list[dict]:
        return self.supabase.table("order_items").select("*").execute().data or []

    def delete(self, row_id: str) -> None:
        self.supabase.table("order_items").delete().eq("order_id", row_id).execute()
        super().delete(row_id)

    def place_order(
        self,
        order: dict,
        items: list[dict],
        accruals: list[dict],
        clear_cart_for: str | None = None,
    ) -> dict:
        """
        Runs the ``place_order`` database function: order, items, stock
        decrement, vendor accruals and cart clear commit or fail together.
        """
        response = self.supabase.rpc(
            "place_order",
            {
                "p_order": order,
                "p_items": items,
                "p_accruals": accruals,
                "p_clear_cart_for": clear_cart_for,
            },
        ).execute()
        return first_row(response)
