"""Activity log service."""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, tzinfo
from itertools import groupby
from typing import Protocol
from uuid import uuid4

from cattle_keeper.domain.activity import (
    ACTIONS,
    CATEGORIES,
    UNDATED,
    ActivityDay,
    ActivityEntry,
)
from cattle_keeper.services.validation import (
    check_choice,
    optional_text,
    require_fields,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("user", "action", "category", "target")


class ActivityRepository(Protocol):
    """Persistence interface for the append-only activity log."""

    def list_activities(self) -> list[ActivityEntry]:
        """Return all entries, newest first."""

    def create_activity(self, entry: ActivityEntry) -> ActivityEntry:
        """Persist a new entry and return it."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class ActivityDays:
    """Lazy view of activity entries grouped by calendar day.

    Each iteration reloads the entries, so the view can be iterated again
    after new activity has been recorded. Undated entries have no calendar
    day and are left out.
    """

    def __init__(
        self, load: Callable[[], list[ActivityEntry]], tz: tzinfo = UTC
    ) -> None:
        self._load = load
        self._tz = tz

    def __iter__(self) -> Iterator[ActivityDay]:
        dated = [entry for entry in self._load() if entry.timestamp != UNDATED]
        entries = sorted(dated, key=lambda entry: entry.timestamp, reverse=True)
        for day, items in groupby(entries, key=self._day_of):
            yield ActivityDay(day=day, entries=tuple(items))

    def _day_of(self, entry: ActivityEntry) -> date:
        timestamp = entry.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        return timestamp.astimezone(self._tz).date()


@dataclass
class ActivityService:
    """Service for recording and viewing activity entries."""

    repository: ActivityRepository
    clock: Callable[[], datetime] = _utc_now

    def record(self, payload: Mapping[str, object]) -> ActivityEntry:
        """Validate and append one activity entry."""
        require_fields(payload, REQUIRED_FIELDS)
        entry = ActivityEntry(
            id=str(uuid4()),
            timestamp=self.clock(),
            user=str(payload["user"]).strip(),
            action=check_choice(payload["action"], ACTIONS, "action"),
            category=check_choice(payload["category"], CATEGORIES, "category"),
            target=str(payload["target"]).strip(),
            details=optional_text(payload.get("details")),
        )
        return self.repository.create_activity(entry)

    def log(  # noqa: PLR0913
        self,
        user: str | None,
        action: str,
        category: str,
        target: str,
        details: str,
    ) -> ActivityEntry | None:
        """Record activity after a committed mutation, never raising."""
        if not user:
            return None
        try:
            return self.record(
                {
                    "user": user,
                    "action": action,
                    "category": category,
                    "target": target,
                    "details": details,
                }
            )
        except Exception:
            logger.exception(
                "Failed to log activity",
                extra={"action": action, "category": category},
            )
            return None

    def list_entries(self) -> list[ActivityEntry]:
        """Return all entries, newest first."""
        return sorted(
            self.repository.list_activities(),
            key=lambda entry: entry.timestamp,
            reverse=True,
        )

    def group_by_day(self, tz: tzinfo = UTC) -> ActivityDays:
        """Return a restartable grouped-by-day view."""
        return ActivityDays(self.repository.list_activities, tz)


def describe_cattle_added(sex: str, breed: str, name: str) -> str:
    """Return the activity text for a new cattle record."""
    return f'Added {sex} {breed} cattle "{name}"'


def describe_cattle_edited(field_label: str, name: str) -> str:
    """Return the activity text for a cattle edit."""
    return f'Edited {field_label} for "{name}"'


def describe_cattle_deleted(name: str, breed: str) -> str:
    """Return the activity text for a removed cattle record."""
    return f'Deleted cattle "{name}" ({breed})'


def describe_milk_added(
    cow_name: str, on_date: str, morning: float, evening: float
) -> str:
    """Return the activity text for a new milk record."""
    return (
        f'Added milk record for "{cow_name}" on {on_date} '
        f"(Morning: {morning:g} KG, Evening: {evening:g} KG, "
        f"Total: {morning + evening:.2f} KG)"
    )


def describe_milk_deleted(cow_name: str, on_date: str, total: float) -> str:
    """Return the activity text for a removed milk record."""
    return f'Deleted milk record for "{cow_name}" on {on_date} ({total:.2f} KG)'
