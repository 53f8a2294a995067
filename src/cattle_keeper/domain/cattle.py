"""Domain models for cattle profiles."""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import datetime

from cattle_keeper.domain.timestamps import parse_timestamp

SEXES = frozenset({"male", "female"})
_TIMESTAMP_ATTRIBUTES = frozenset({"created_at", "last_edited_at"})

# Attribute name -> wire (JSON / column) name, in declaration order.
CATTLE_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "breed": "breed",
    "date_of_birth": "dateOfBirth",
    "sex": "sex",
    "image_url": "imageUrl",
    "served_date": "servedDate",
    "mating_breed": "matingBreed",
    "expected_calf_birth_date": "expectedCalfBirthDate",
    "calf_birth_date": "calfBirthDate",
    "calf_sex": "calfSex",
    "dried_date": "driedDate",
    "created_by": "createdBy",
    "created_at": "createdAt",
    "last_edited_by": "lastEditedBy",
    "last_edited_at": "lastEditedAt",
    "last_edited_field": "lastEditedField",
}

BREEDING_LABELS: dict[str, str] = {
    "served_date": "Served Date",
    "mating_breed": "Mating Breed",
    "expected_calf_birth_date": "Expected Calf Birth",
    "calf_birth_date": "Calf Birth Date",
    "calf_sex": "Calf Sex",
    "dried_date": "Dried Date",
}


@dataclass(frozen=True)
class CattleRecord:
    """A tracked animal profile with optional breeding and audit data."""

    id: str
    name: str
    breed: str
    date_of_birth: str
    sex: str
    image_url: str | None = None
    served_date: str | None = None
    mating_breed: str | None = None
    expected_calf_birth_date: str | None = None
    calf_birth_date: str | None = None
    calf_sex: str | None = None
    dried_date: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    last_edited_by: str | None = None
    last_edited_at: datetime | None = None
    last_edited_field: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Return the camelCase JSON form, omitting unset fields."""
        payload: dict[str, object] = {}
        for attribute, column in CATTLE_COLUMNS.items():
            value = getattr(self, attribute)
            if value is None:
                continue
            payload[column] = (
                value.isoformat() if isinstance(value, datetime) else value
            )
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "CattleRecord":
        """Build a record from a camelCase row or JSON object."""
        values: dict[str, object] = {}
        for attribute, column in CATTLE_COLUMNS.items():
            raw = payload.get(column)
            if attribute in _TIMESTAMP_ATTRIBUTES:
                values[attribute] = parse_timestamp(raw)
            else:
                values[attribute] = None if raw is None else str(raw)
        for attribute in ("id", "name", "breed", "date_of_birth", "sex"):
            values[attribute] = values[attribute] or ""
        return cls(**values)  # type: ignore[arg-type]


@dataclass(frozen=True)
class CattlePatch:
    """Sparse set of allowed cattle field changes.

    A slot left as ``None`` is untouched. An empty string clears the stored
    value. Slots are applied in declaration order.
    """

    name: str | None = None
    breed: str | None = None
    date_of_birth: str | None = None
    sex: str | None = None
    image_url: str | None = None
    served_date: str | None = None
    mating_breed: str | None = None
    expected_calf_birth_date: str | None = None
    calf_birth_date: str | None = None
    calf_sex: str | None = None
    dried_date: str | None = None
    last_edited_by: str | None = None
    # Accepted for compatibility; replaced by the server stamp on apply.
    last_edited_at: str | None = None
    last_edited_field: str | None = None

    def changes(self) -> dict[str, object]:
        """Return the populated slots keyed by attribute name."""
        result: dict[str, object] = {}
        for slot in fields(self):
            value = getattr(self, slot.name)
            if value is not None:
                result[slot.name] = value
        return result

    def is_empty(self) -> bool:
        """Return true when no slot is populated."""
        return not self.changes()


PATCH_SLOTS: tuple[str, ...] = tuple(slot.name for slot in fields(CattlePatch))


@dataclass(frozen=True)
class BreedingInfo:
    """Full set of breeding values as edited in one form."""

    served_date: str | None = None
    mating_breed: str | None = None
    expected_calf_birth_date: str | None = None
    calf_birth_date: str | None = None
    calf_sex: str | None = None
    dried_date: str | None = None

    @classmethod
    def of(cls, record: CattleRecord) -> "BreedingInfo":
        """Return the breeding values currently stored on a record."""
        return cls(**{name: getattr(record, name) for name in BREEDING_LABELS})
