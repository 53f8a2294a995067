"""Supabase repository for milk records."""

from dataclasses import dataclass

from supabase import Client

from cattle_keeper.adapters.supabase_errors import storage_errors
from cattle_keeper.domain.milk import MilkRecord
from cattle_keeper.errors import StorageError
from cattle_keeper.services.milk import MilkRepository

TABLE = "milk_records"


@dataclass
class SupabaseMilkRepository(MilkRepository):
    """Supabase implementation for milk record persistence."""

    client: Client

    def list_milk_records(self) -> list[MilkRecord]:
        """Return records by date, then creation time, newest first."""
        with storage_errors("Failed to fetch milk records"):
            response = (
                self.client.table(TABLE)
                .select("*")
                .order("date", desc=True)
                .order("createdAt", desc=True)
                .execute()
            )
        return [MilkRecord.from_payload(row) for row in response.data or []]

    def get_milk_record(self, record_id: str) -> MilkRecord | None:
        """Return a milk record by id."""
        with storage_errors("Failed to fetch milk record"):
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return MilkRecord.from_payload(response.data[0])

    def create_milk_record(self, record: MilkRecord) -> MilkRecord:
        """Insert a milk record row."""
        with storage_errors("Failed to add milk record"):
            response = self.client.table(TABLE).insert(record.to_payload()).execute()
        if not response.data:
            raise StorageError("Failed to create milk record")
        return MilkRecord.from_payload(response.data[0])

    def delete_milk_record(self, record_id: str) -> bool:
        """Delete a milk record row."""
        with storage_errors("Failed to delete milk record"):
            response = self.client.table(TABLE).delete().eq("id", record_id).execute()
        return bool(response.data)
