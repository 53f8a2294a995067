"""Supabase repository for activity entries."""

from dataclasses import dataclass

from supabase import Client

from cattle_keeper.adapters.supabase_errors import storage_errors
from cattle_keeper.domain.activity import ActivityEntry
from cattle_keeper.errors import StorageError
from cattle_keeper.services.activity import ActivityRepository

TABLE = "activities"


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Supabase implementation for the append-only activity log."""

    client: Client

    def list_activities(self) -> list[ActivityEntry]:
        """Return all entries, newest first."""
        with storage_errors("Failed to fetch activity logs"):
            response = (
                self.client.table(TABLE)
                .select("*")
                .order("timestamp", desc=True)
                .execute()
            )
        return [ActivityEntry.from_payload(row) for row in response.data or []]

    def create_activity(self, entry: ActivityEntry) -> ActivityEntry:
        """Insert an activity row."""
        with storage_errors("Failed to add activity log"):
            response = self.client.table(TABLE).insert(entry.to_payload()).execute()
        if not response.data:
            raise StorageError("Failed to create activity entry")
        return ActivityEntry.from_payload(response.data[0])
