from .base import SupabaseRepository, first_row


class PaymentRequestRepository(SupabaseRepository):
    table_name = "payment_requests"

    def list_for_vendor(self, vendor_id: str) -> list[dict]:
        return (
            self.table.select("*")
            .eq("vendor_id", vendor_id)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )

    def list_by_status(self, statuses: list[str]) -> list[dict]:
        return (
            self.table.select("*")
            .in_("status", statuses)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )

    def find_pending(self, vendor_id: str) -> dict | None:
        response = (
            self.table.select("*")
            .eq("vendor_id", vendor_id)
            .eq("status", "pending")
            .limit(1)
            .execute()
        )
        return first_row(response)

    def settle(self, request_id: str, processed_by: str) -> dict:
        """Runs ``settle_payment_request`` for one request."""
        response = self.supabase.rpc(
            "settle_payment_request",
            {"p_request_id": request_id, "p_processed_by": processed_by},
        ).execute()
        return response.data or {"settled": False, "reason": "invalid_status", "amount_fils": 0}
