"""Domain models for milk yield records."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from cattle_keeper.domain.timestamps import parse_timestamp


@dataclass(frozen=True)
class MilkRecord:
    """One morning+evening measurement for a named cow on a date."""

    id: str
    cow_name: str
    date: str
    morning_amount: float
    evening_amount: float
    total_daily: float
    added_by: str | None = None
    created_at: datetime | None = None

    def to_payload(self) -> dict[str, object]:
        """Return the camelCase JSON form."""
        payload: dict[str, object] = {
            "id": self.id,
            "cowName": self.cow_name,
            "date": self.date,
            "morningAmount": self.morning_amount,
            "eveningAmount": self.evening_amount,
            "totalDaily": self.total_daily,
        }
        if self.added_by is not None:
            payload["addedBy"] = self.added_by
        if self.created_at is not None:
            payload["createdAt"] = self.created_at.isoformat()
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "MilkRecord":
        """Build a record from a camelCase row or JSON object."""
        added_by = payload.get("addedBy")
        return cls(
            id=str(payload.get("id", "")),
            cow_name=str(payload.get("cowName", "")),
            date=str(payload.get("date", "")),
            morning_amount=float(payload.get("morningAmount") or 0.0),
            evening_amount=float(payload.get("eveningAmount") or 0.0),
            total_daily=float(payload.get("totalDaily") or 0.0),
            added_by=str(added_by) if added_by else None,
            created_at=parse_timestamp(payload.get("createdAt")),
        )


@dataclass(frozen=True)
class CowYield:
    """A single cow's contribution to a day's production."""

    name: str
    amount: float


@dataclass(frozen=True)
class DailyProduction:
    """Milk produced by all cows on one date."""

    date: str
    cows: list[CowYield]
    total: float


@dataclass(frozen=True)
class ProductionSummary:
    """Totals for a filtered set of milk records."""

    record_count: int
    total: float
    average: float
    days: list[DailyProduction]
