from .base import SupabaseRepository, first_row


class VendorRepository(SupabaseRepository):
    table_name = "vendors"

    def list_all(self, approved_only: bool = False) -> list[dict]:
        query = self.table.select("*").order("created_at", desc=True)
        if approved_only:
            query = query.eq("is_approved", True)
        return query.execute().data or []

    def get_by_user(self, user_id: str) -> dict | None:
        return first_row(self.table.select("*").eq("user_id", user_id).limit(1).execute())

    def settle_payout(self, vendor_id: str, processed_by: str) -> dict:
        """
        Runs ``settle_vendor_payout``: the whole pending balance moves to
        lifetime payouts and every open request is marked paid.
        """
        response = self.supabase.rpc(
            "settle_vendor_payout",
            {"p_vendor_id": vendor_id, "p_processed_by": processed_by},
        ).execute()
        return response.data or {"amount_fils": 0, "requests_settled": 0}

    def ledger(self, vendor_id: str) -> list[dict]:
        return (
            self.supabase.table("vendor_ledger")
            .select("*")
            .eq("vendor_id", vendor_id)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )
