from .base import SupabaseRepository, first_row


class CartRepository(SupabaseRepository):
    table_name = "cart_items"

    def list_for_user(self, user_id: str) -> list[dict]:
        return self.table.select("*").eq("user_id", user_id).execute().data or []

    def find(self, user_id: str, product_id: str) -> dict | None:
        response = (
            self.table.select("*")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        return first_row(response)

    def set_quantity(self, item_id: str, quantity: int) -> dict | None:
        return self.update(item_id, {"quantity": quantity})

    def clear(self, user_id: str) -> None:
        self.table.delete().eq("user_id", user_id).execute()
