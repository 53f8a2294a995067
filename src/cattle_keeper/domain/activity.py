"""Domain models for the activity log."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime

from cattle_keeper.domain.timestamps import parse_timestamp

ACTIONS = frozenset({"add", "edit", "delete"})
CATEGORIES = frozenset({"cattle", "milk"})
# Stand-in timestamp for rows whose stored timestamp is missing or unreadable.
UNDATED = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class ActivityEntry:
    """Immutable audit-log line for an add, edit or delete."""

    id: str
    timestamp: datetime
    user: str
    action: str
    category: str
    target: str
    details: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Return the JSON form."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "user": self.user,
            "action": self.action,
            "category": self.category,
            "target": self.target,
            "details": self.details,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "ActivityEntry":
        """Build an entry from a stored row or JSON object."""
        details = payload.get("details")
        return cls(
            id=str(payload.get("id", "")),
            timestamp=parse_timestamp(payload.get("timestamp"))
            or UNDATED,
            user=str(payload.get("user", "")),
            action=str(payload.get("action", "")),
            category=str(payload.get("category", "")),
            target=str(payload.get("target", "")),
            details=str(details) if details else None,
        )


@dataclass(frozen=True)
class ActivityDay:
    """Activity entries sharing one calendar date, newest first."""

    day: date
    entries: tuple[ActivityEntry, ...]
