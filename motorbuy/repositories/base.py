import uuid

from supabase import Client


def first_row(response) -> dict | None:
    """Returns the first row of a PostgREST response, or None when empty."""
    data = response.data
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


def is_uuid(value) -> bool:
    """Ids that Postgres would reject with 22P02 can never match a row."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


class SupabaseRepository:
    """
    Thin data-access wrapper around one Supabase table.

    Subclasses set ``table_name`` and expose the queries the services need;
    no business rules live here. Lookups by a malformed id find nothing
    instead of reaching PostgREST.
    """

    table_name: str = ""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    @property
    def table(self):
        return self.supabase.table(self.table_name)

    def get(self, row_id: str) -> dict | None:
        if not is_uuid(row_id):
            return None
        return first_row(self.table.select("*").eq("id", row_id).limit(1).execute())

    def get_many(self, row_ids) -> list[dict]:
        row_ids = [row_id for row_id in dict.fromkeys(row_ids) if is_uuid(row_id)]
        if not row_ids:
            return []
        return self.table.select("*").in_("id", row_ids).execute().data or []

    def insert(self, data: dict) -> dict:
        return first_row(self.table.insert(data).execute())

    def update(self, row_id: str, data: dict) -> dict | None:
        return first_row(self.table.update(data).eq("id", row_id).execute())

    def delete(self, row_id: str) -> None:
        self.table.delete().eq("id", row_id).execute()
