"""Cattle record service and partial-update merge engine."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from cattle_keeper.domain.cattle import (
    BREEDING_LABELS,
    CATTLE_COLUMNS,
    PATCH_SLOTS,
    SEXES,
    BreedingInfo,
    CattlePatch,
    CattleRecord,
)
from cattle_keeper.errors import NoOpError, NotFoundError, ValidationError
from cattle_keeper.services.validation import (
    check_choice,
    optional_text,
    parse_iso_date,
    require_fields,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "breed", "dateOfBirth", "sex")
DEFAULT_EDIT_LABEL = "Breeding Info"
PHOTO_LABEL = "Photo"
ALL_SEXES = "all"

_DATE_SLOTS = frozenset(
    {
        "date_of_birth",
        "served_date",
        "expected_calf_birth_date",
        "calf_birth_date",
        "dried_date",
    }
)
_REQUIRED_SLOTS = frozenset({"name", "breed", "date_of_birth", "sex"})

DeletionHook = Callable[[CattleRecord], None]


class CattleRepository(Protocol):
    """Persistence interface for cattle records."""

    def list_cattle(self) -> list[CattleRecord]:
        """Return all cattle ordered by name."""

    def get_cattle(self, cattle_id: str) -> CattleRecord | None:
        """Return a cattle record by id, if present."""

    def create_cattle(self, record: CattleRecord) -> CattleRecord:
        """Persist a new cattle record and return it."""

    def update_cattle(
        self, cattle_id: str, changes: dict[str, object]
    ) -> CattleRecord | None:
        """Apply attribute changes and return the stored record."""

    def delete_cattle(self, cattle_id: str) -> bool:
        """Delete a record, returning false when it did not exist."""

    def ping(self) -> bool:
        """Return true when the backing store answers."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def build_cattle(
    payload: Mapping[str, object], record_id: str, created_at: datetime
) -> CattleRecord:
    """Validate a create payload and build the record to persist."""
    require_fields(payload, REQUIRED_FIELDS)
    sex = check_choice(payload["sex"], SEXES, "sex")
    date_of_birth = parse_iso_date(payload["dateOfBirth"], "dateOfBirth")
    breeding = {
        name: _optional_value(name, payload.get(CATTLE_COLUMNS[name]))
        for name in BREEDING_LABELS
    }
    last_edited_by = optional_text(payload.get("lastEditedBy"))
    last_edited_field = optional_text(payload.get("lastEditedField"))
    edited = last_edited_by is not None or last_edited_field is not None
    return CattleRecord(
        id=record_id,
        name=str(payload["name"]).strip(),
        breed=str(payload["breed"]).strip(),
        date_of_birth=date_of_birth.isoformat(),
        sex=sex,
        image_url=optional_text(payload.get("imageUrl")),
        created_by=optional_text(payload.get("createdBy")),
        created_at=created_at,
        last_edited_by=last_edited_by,
        last_edited_at=created_at if edited else None,
        last_edited_field=last_edited_field,
        **breeding,
    )


def patch_from_payload(payload: Mapping[str, object]) -> CattlePatch:
    """Build a patch from camelCase keys, ignoring keys outside the allow-list.

    An explicit ``null`` is treated as a request to clear the field.
    """
    values: dict[str, str] = {}
    for slot in PATCH_SLOTS:
        column = CATTLE_COLUMNS[slot]
        if column not in payload:
            continue
        raw = payload[column]
        values[slot] = "" if raw is None else str(raw).strip()
    for slot in _DATE_SLOTS.intersection(values):
        if values[slot]:
            values[slot] = parse_iso_date(
                values[slot], CATTLE_COLUMNS[slot]
            ).isoformat()
    patch = CattlePatch(**values)
    validate_patch(patch)
    return patch


def validate_patch(patch: CattlePatch) -> None:
    """Reject patch values that would break record invariants."""
    for slot, value in patch.changes().items():
        if slot == "last_edited_at":
            continue
        if slot in _REQUIRED_SLOTS and not str(value).strip():
            raise ValidationError(f"{CATTLE_COLUMNS[slot]} cannot be cleared")
        if slot == "sex":
            check_choice(value, SEXES, "sex")
        elif slot == "calf_sex" and value:
            check_choice(value, SEXES, "calfSex")
        elif slot in _DATE_SLOTS and value:
            parse_iso_date(value, CATTLE_COLUMNS[slot])


def describe_breeding_changes(
    previous: CattleRecord, edited: BreedingInfo, photo_changed: bool = False
) -> str:
    """Return the comma-joined labels of fields that differ from the record."""
    labels = [PHOTO_LABEL] if photo_changed else []
    for name, label in BREEDING_LABELS.items():
        before = getattr(previous, name) or ""
        after = getattr(edited, name) or ""
        if before != after:
            labels.append(label)
    return ", ".join(labels) if labels else DEFAULT_EDIT_LABEL


def breeding_edit_label(
    current: CattleRecord, breeding: BreedingInfo, image_url: str | None = None
) -> tuple[str, bool]:
    """Return the change label for a breeding edit and whether the photo moved."""
    photo_changed = image_url is not None and image_url != (current.image_url or "")
    return describe_breeding_changes(current, breeding, photo_changed), photo_changed


def breeding_from_payload(payload: Mapping[str, object]) -> BreedingInfo:
    """Build validated breeding values from camelCase keys; absent means empty."""
    return BreedingInfo(
        **{
            name: _optional_value(name, payload.get(CATTLE_COLUMNS[name]))
            for name in BREEDING_LABELS
        }
    )


@dataclass
class CattleService:
    """Application service for cattle profiles."""

    repository: CattleRepository
    deletion_hooks: list[DeletionHook] = field(default_factory=list)
    clock: Callable[[], datetime] = _utc_now

    def list_cattle(
        self, search: str | None = None, sex: str | None = None
    ) -> list[CattleRecord]:
        """Return cattle ordered by name.

        ``search`` matches a case-insensitive substring of the name or breed.
        ``sex`` keeps one sex; ``"all"`` or no value keeps both.
        """
        records = self.repository.list_cattle()
        if search and search.strip():
            needle = search.strip().casefold()
            records = [
                r
                for r in records
                if needle in r.name.casefold() or needle in r.breed.casefold()
            ]
        if sex and sex != ALL_SEXES:
            wanted = check_choice(sex, SEXES, "sex")
            records = [r for r in records if r.sex == wanted]
        return records

    def get_cattle(self, cattle_id: str) -> CattleRecord:
        """Return a cattle record or raise NotFoundError."""
        record = self.repository.get_cattle(cattle_id)
        if record is None:
            raise NotFoundError("Cattle record not found")
        return record

    def create_cattle(self, payload: Mapping[str, object]) -> CattleRecord:
        """Validate and persist a new cattle record."""
        record = build_cattle(
            payload, record_id=str(uuid4()), created_at=self.clock()
        )
        created = self.repository.create_cattle(record)
        logger.info("Created cattle record", extra={"cattle_id": created.id})
        return created

    def update_cattle(self, cattle_id: str, patch: CattlePatch) -> CattleRecord:
        """Apply a sparse patch and stamp the edit time."""
        self.get_cattle(cattle_id)
        validate_patch(patch)
        changes = patch.changes()
        if not changes:
            raise NoOpError("No fields to update")
        changes["last_edited_at"] = self.clock()
        updated = self.repository.update_cattle(cattle_id, changes)
        if updated is None:
            raise NotFoundError("Cattle record not found")
        return updated

    def edit_breeding_info(
        self,
        cattle_id: str,
        breeding: BreedingInfo,
        editor: str | None = None,
        image_url: str | None = None,
    ) -> CattleRecord:
        """Replace the breeding values in place and label what changed."""
        current = self.get_cattle(cattle_id)
        label, photo_changed = breeding_edit_label(current, breeding, image_url)
        patch = CattlePatch(
            image_url=image_url if photo_changed else None,
            last_edited_by=editor,
            last_edited_field=label,
            **{name: getattr(breeding, name) or "" for name in BREEDING_LABELS},
        )
        return self.update_cattle(cattle_id, patch)

    def delete_cattle(
        self,
        cattle_id: str,
        defer: Callable[..., object] | None = None,
        cleanup: bool = True,
    ) -> CattleRecord:
        """Delete a record and run post-delete hooks.

        When ``defer`` is given (e.g. ``BackgroundTasks.add_task``) the hooks
        are scheduled through it instead of running inline. ``cleanup=False``
        skips the hooks, which keeps the photo for a record being recreated.
        """
        record = self.get_cattle(cattle_id)
        if not self.repository.delete_cattle(cattle_id):
            raise NotFoundError("Cattle record not found")
        logger.info("Deleted cattle record", extra={"cattle_id": cattle_id})
        if not cleanup:
            return record
        if defer is None:
            self.dispatch_deleted(record)
        else:
            defer(self.dispatch_deleted, record)
        return record

    def dispatch_deleted(self, record: CattleRecord) -> None:
        """Run deletion hooks, logging failures without raising."""
        for hook in self.deletion_hooks:
            try:
                hook(record)
            except Exception:
                logger.exception(
                    "Post-delete hook failed", extra={"cattle_id": record.id}
                )

    def is_store_reachable(self) -> bool:
        """Return true when the backing store answers a ping."""
        try:
            return self.repository.ping()
        except Exception:
            logger.exception("Store health check failed")
            return False


def _optional_value(name: str, value: object) -> str | None:
    text = optional_text(value)
    if text is None:
        return None
    if name == "calf_sex":
        return check_choice(text, SEXES, "calfSex")
    if name in _DATE_SLOTS:
        return parse_iso_date(text, CATTLE_COLUMNS[name]).isoformat()
    return text
