"""Supabase repository for cattle records."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from cattle_keeper.adapters.supabase_errors import storage_errors
from cattle_keeper.domain.cattle import CATTLE_COLUMNS, CattleRecord
from cattle_keeper.errors import StorageError
from cattle_keeper.services.cattle import CattleRepository

TABLE = "cattle"


@dataclass
class SupabaseCattleRepository(CattleRepository):
    """Supabase implementation for cattle persistence."""

    client: Client

    def list_cattle(self) -> list[CattleRecord]:
        """Return all cattle ordered by name."""
        with storage_errors("Failed to fetch cattle records"):
            response = (
                self.client.table(TABLE).select("*").order("name", desc=False).execute()
            )
        return [CattleRecord.from_payload(row) for row in response.data or []]

    def get_cattle(self, cattle_id: str) -> CattleRecord | None:
        """Return a cattle record by id."""
        with storage_errors("Failed to fetch cattle record"):
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("id", cattle_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return CattleRecord.from_payload(response.data[0])

    def create_cattle(self, record: CattleRecord) -> CattleRecord:
        """Insert a cattle row and return the stored record."""
        with storage_errors("Failed to add cattle record"):
            response = self.client.table(TABLE).insert(record.to_payload()).execute()
        if not response.data:
            raise StorageError("Failed to create cattle record")
        return CattleRecord.from_payload(response.data[0])

    def update_cattle(
        self, cattle_id: str, changes: dict[str, object]
    ) -> CattleRecord | None:
        """Update only the changed columns and return the stored record."""
        row = {
            CATTLE_COLUMNS[name]: _column_value(value)
            for name, value in changes.items()
        }
        with storage_errors("Failed to update cattle record"):
            response = (
                self.client.table(TABLE).update(row).eq("id", cattle_id).execute()
            )
        if not response.data:
            return None
        return CattleRecord.from_payload(response.data[0])

    def delete_cattle(self, cattle_id: str) -> bool:
        """Delete a cattle row."""
        with storage_errors("Failed to delete cattle record"):
            response = self.client.table(TABLE).delete().eq("id", cattle_id).execute()
        return bool(response.data)

    def ping(self) -> bool:
        """Issue a minimal query against the cattle table."""
        with storage_errors("Cattle store is unreachable"):
            self.client.table(TABLE).select("id").limit(1).execute()
        return True


def _column_value(value: object) -> object:
    if isinstance(value, datetime):
        return value.isoformat()
    if value == "":
        return None
    return value
