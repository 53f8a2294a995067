"""Pydantic models for API request bodies.

Every field is optional here; required-field and value checks happen in the
services so the error messages match across entry points.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model with camelCase wire names that drops unknown keys."""

    model_config = ConfigDict(
        extra="ignore", alias_generator=to_camel, populate_by_name=True
    )

    def payload(self) -> dict[str, object]:
        """Return only the keys the caller actually sent, by wire name."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class BreedingUpdate(ApiModel):
    """Body for a breeding edit; omitted breeding fields are cleared."""

    image_url: str | None = None
    served_date: str | None = None
    mating_breed: str | None = None
    expected_calf_birth_date: str | None = None
    calf_birth_date: str | None = None
    calf_sex: str | None = None
    dried_date: str | None = None
    last_edited_by: str | None = None


class CattleCreate(ApiModel):
    """Body for creating a cattle record."""

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
    created_by: str | None = None
    last_edited_by: str | None = None
    last_edited_field: str | None = None


class CattleUpdate(ApiModel):
    """Body for a partial cattle update; ``null`` clears a field."""

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
    last_edited_at: str | None = None
    last_edited_field: str | None = None


class MilkCreate(ApiModel):
    """Body for creating a milk record."""

    cow_name: str | None = None
    date: str | None = None
    morning_amount: float | str | None = None
    evening_amount: float | str | None = None
    added_by: str | None = None


class ActivityCreate(ApiModel):
    """Body for appending an activity entry."""

    user: str | None = None
    action: str | None = None
    category: str | None = None
    target: str | None = None
    details: str | None = None
