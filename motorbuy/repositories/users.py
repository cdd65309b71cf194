from .base import SupabaseRepository


class UserRepository(SupabaseRepository):
    table_name = "users"

    def list_all(self) -> list[dict]:
        return self.table.select("*").order("created_at", desc=True).execute().data or []

    def set_role(self, user_id: str, role: str) -> dict | None:
        return self.update(user_id, {"role": role})


class StoryRepository(SupabaseRepository):
    table_name = "vendor_stories"

    def list_all(self) -> list[dict]:
        return self.table.select("*").order("created_at", desc=True).execute().data or []


class AuditRepository(SupabaseRepository):
    table_name = "audit_logs"

    def list_recent(self, limit: int, offset: int, resource_type: str | None = None) -> list[dict]:
        query = self.table.select("*").order("created_at", desc=True).range(offset, offset + limit - 1)
        if resource_type:
            query = query.eq("resource_type", resource_type)
        return query.execute().data or []
