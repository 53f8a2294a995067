"""Milk yield record service."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from cattle_keeper.domain.milk import (
    CowYield,
    DailyProduction,
    MilkRecord,
    ProductionSummary,
)
from cattle_keeper.errors import NotFoundError
from cattle_keeper.services.derived import coerce_amount, total_daily
from cattle_keeper.services.validation import (
    optional_text,
    parse_iso_date,
    require_fields,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("cowName", "date")


class MilkRepository(Protocol):
    """Persistence interface for milk records."""

    def list_milk_records(self) -> list[MilkRecord]:
        """Return records by date descending, newest creation first."""

    def get_milk_record(self, record_id: str) -> MilkRecord | None:
        """Return a milk record by id, if present."""

    def create_milk_record(self, record: MilkRecord) -> MilkRecord:
        """Persist a new milk record and return it."""

    def delete_milk_record(self, record_id: str) -> bool:
        """Delete a record, returning false when it did not exist."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def normalize_cow_name(name: str) -> str:
    """Return the key used to match milk records to a cow."""
    return name.strip().casefold()


def build_milk_record(
    payload: Mapping[str, object], record_id: str, created_at: datetime
) -> MilkRecord:
    """Validate a create payload; caller-supplied totals are ignored."""
    require_fields(payload, REQUIRED_FIELDS)
    record_date = parse_iso_date(payload["date"], "date")
    morning = coerce_amount(payload.get("morningAmount"))
    evening = coerce_amount(payload.get("eveningAmount"))
    return MilkRecord(
        id=record_id,
        cow_name=str(payload["cowName"]).strip(),
        date=record_date.isoformat(),
        morning_amount=morning,
        evening_amount=evening,
        total_daily=total_daily(morning, evening),
        added_by=optional_text(payload.get("addedBy")),
        created_at=created_at,
    )


def summarize_production(records: list[MilkRecord]) -> ProductionSummary:
    """Group records by date, newest date first, with per-cow amounts."""
    days: dict[str, list[CowYield]] = {}
    for record in records:
        days.setdefault(record.date, []).append(
            CowYield(name=record.cow_name, amount=record.total_daily)
        )
    daily = [
        DailyProduction(date=day, cows=cows, total=sum(cow.amount for cow in cows))
        for day, cows in sorted(days.items(), key=lambda item: item[0], reverse=True)
    ]
    total = sum(record.total_daily for record in records)
    average = total / len(records) if records else 0.0
    return ProductionSummary(
        record_count=len(records), total=total, average=average, days=daily
    )


@dataclass
class MilkService:
    """Application service for milk records."""

    repository: MilkRepository
    clock: Callable[[], datetime] = _utc_now

    def list_records(
        self, cow_name: str | None = None, on_date: str | None = None
    ) -> list[MilkRecord]:
        """Return records, optionally filtered by cow and date."""
        records = self.repository.list_milk_records()
        if cow_name and cow_name.strip():
            key = normalize_cow_name(cow_name)
            records = [r for r in records if normalize_cow_name(r.cow_name) == key]
        if on_date:
            day = parse_iso_date(on_date, "date").isoformat()
            records = [r for r in records if r.date == day]
        return records

    def create_record(self, payload: Mapping[str, object]) -> MilkRecord:
        """Validate and persist a new milk record."""
        record = build_milk_record(
            payload, record_id=str(uuid4()), created_at=self.clock()
        )
        created = self.repository.create_milk_record(record)
        logger.info("Created milk record", extra={"milk_record_id": created.id})
        return created

    def delete_record(self, record_id: str) -> MilkRecord:
        """Delete a milk record and return what was removed."""
        record = self.repository.get_milk_record(record_id)
        if record is None or not self.repository.delete_milk_record(record_id):
            raise NotFoundError("Milk record not found")
        return record

    def summarize(
        self, cow_name: str | None = None, on_date: str | None = None
    ) -> ProductionSummary:
        """Return production totals for the filtered records."""
        return summarize_production(self.list_records(cow_name, on_date))
