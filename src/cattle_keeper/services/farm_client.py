"""Client-side workflows on top of the HTTP API.

Reads are enriched from the local audit cache and writes record the audit
attributes they sent, so attribution survives even when the server drops it.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo

from cattle_keeper.adapters.cattle_keeper_client import CattleKeeperApi, JsonObject
from cattle_keeper.domain.activity import ActivityDay, ActivityEntry
from cattle_keeper.domain.cattle import (
    BREEDING_LABELS,
    CATTLE_COLUMNS,
    BreedingInfo,
    CattleRecord,
)
from cattle_keeper.services.activity import ActivityDays
from cattle_keeper.services.cattle import breeding_edit_label
from cattle_keeper.services.reconciliation import AuditReconciler

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class FarmClient:
    """Async facade used by interactive clients of the record store."""

    api: CattleKeeperApi
    cattle_audit: AuditReconciler
    milk_audit: AuditReconciler
    user: str
    clock: Callable[[], datetime] = _utc_now

    async def list_cattle(
        self, search: str | None = None, sex: str | None = None
    ) -> list[JsonObject]:
        """Return cattle with audit gaps filled from the cache."""
        return self.cattle_audit.enrich(await self.api.list_cattle(search, sex))

    async def get_cattle(self, cattle_id: str) -> JsonObject:
        """Return one cattle record with audit gaps filled from the cache."""
        return self.cattle_audit.enrich_one(await self.api.get_cattle(cattle_id))

    async def add_cattle(self, payload: Mapping[str, object]) -> JsonObject:
        """Create a cattle record attributed to the current user."""
        stamp = self.clock().isoformat()
        body = {
            **payload,
            "createdBy": self.user,
            "lastEditedBy": self.user,
        }
        created = await self.api.create_cattle(body)
        self.cattle_audit.remember(
            str(created["id"]),
            {
                "createdBy": self.user,
                "lastEditedBy": self.user,
                "lastEditedAt": created.get("lastEditedAt") or stamp,
            },
        )
        return self.cattle_audit.enrich_one(created)

    async def edit_breeding_info(
        self,
        cattle_id: str,
        breeding: BreedingInfo,
        image_url: str | None = None,
    ) -> JsonObject:
        """Update breeding values in place and label which fields changed."""
        current = CattleRecord.from_payload(await self.api.get_cattle(cattle_id))
        label, photo_changed = breeding_edit_label(current, breeding, image_url)
        body: dict[str, object] = {
            CATTLE_COLUMNS[name]: getattr(breeding, name)
            for name in BREEDING_LABELS
            if getattr(breeding, name)
        }
        if photo_changed:
            body["imageUrl"] = image_url
        body["lastEditedBy"] = self.user
        updated = await self.api.edit_breeding_info(cattle_id, body)
        label = str(updated.get("lastEditedField") or label)
        self.cattle_audit.remember(
            cattle_id,
            {
                "lastEditedBy": self.user,
                "lastEditedField": label,
                "lastEditedAt": updated.get("lastEditedAt")
                or self.clock().isoformat(),
            },
        )
        return self.cattle_audit.enrich_one(updated)

    async def replace_cattle(
        self,
        cattle_id: str,
        breeding: BreedingInfo,
        image_url: str | None = None,
    ) -> JsonObject:
        """Apply a breeding edit by deleting and recreating the record.

        The record gets a new id; its cached audit attributes move with it and
        the stored photo is kept.
        """
        current = CattleRecord.from_payload(
            self.cattle_audit.enrich_one(await self.api.get_cattle(cattle_id))
        )
        label, photo_changed = breeding_edit_label(current, breeding, image_url)
        body = {
            **current.to_payload(),
            **{
                CATTLE_COLUMNS[name]: getattr(breeding, name)
                for name in BREEDING_LABELS
                if getattr(breeding, name)
            },
            "lastEditedBy": self.user,
            "lastEditedField": label,
        }
        for key in ("id", "createdAt", "lastEditedAt"):
            body.pop(key, None)
        for name in BREEDING_LABELS:
            if not getattr(breeding, name):
                body.pop(CATTLE_COLUMNS[name], None)
        if photo_changed:
            body["imageUrl"] = image_url
        await self.api.delete_cattle(cattle_id, keep_image=True)
        created = await self.api.create_cattle(body)
        new_id = str(created["id"])
        self.cattle_audit.rekey(
            cattle_id,
            new_id,
            {
                "createdBy": current.created_by or "",
                "lastEditedBy": self.user,
                "lastEditedField": label,
                "lastEditedAt": created.get("lastEditedAt")
                or self.clock().isoformat(),
            },
        )
        logger.info(
            "Recreated cattle record",
            extra={"cattle_id": cattle_id, "new_cattle_id": new_id},
        )
        return self.cattle_audit.enrich_one(created)

    async def upload_photo(
        self, filename: str, content: bytes, content_type: str
    ) -> str:
        """Upload a cattle photo and return the URL to store on the record."""
        uploaded = await self.api.upload_image(filename, content, content_type)
        return str(uploaded["url"])

    async def delete_cattle(self, cattle_id: str) -> None:
        """Delete a cattle record and drop its cache entry."""
        await self.api.delete_cattle(cattle_id)
        self.cattle_audit.forget(cattle_id)

    async def list_milk(
        self, cow_name: str | None = None, on_date: str | None = None
    ) -> list[JsonObject]:
        """Return milk records with attribution filled from the cache."""
        return self.milk_audit.enrich(await self.api.list_milk(cow_name, on_date))

    async def add_milk(
        self, cow_name: str, on_date: str, morning: float, evening: float
    ) -> JsonObject:
        """Record a day's yield attributed to the current user."""
        created = await self.api.create_milk(
            {
                "cowName": cow_name,
                "date": on_date,
                "morningAmount": morning,
                "eveningAmount": evening,
                "addedBy": self.user,
            }
        )
        self.milk_audit.remember(str(created["id"]), {"addedBy": self.user})
        return self.milk_audit.enrich_one(created)

    async def delete_milk(self, record_id: str) -> None:
        """Delete a milk record and drop its cache entry."""
        await self.api.delete_milk(record_id)
        self.milk_audit.forget(record_id)

    async def activity_days(self, tz: tzinfo = UTC) -> list[ActivityDay]:
        """Return the activity log grouped by calendar day, newest first."""
        entries = [
            ActivityEntry.from_payload(item)
            for item in await self.api.list_activities()
        ]
        return list(ActivityDays(lambda: entries, tz))
