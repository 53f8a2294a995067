"""Input validation helpers for create and patch payloads."""

from collections.abc import Iterable, Mapping
from datetime import date

from cattle_keeper.errors import ValidationError


def missing_fields(payload: Mapping[str, object], required: Iterable[str]) -> list[str]:
    """Return required keys that are absent or blank."""
    missing = []
    for key in required:
        value = payload.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(key)
    return missing


def require_fields(payload: Mapping[str, object], required: tuple[str, ...]) -> None:
    """Raise a ValidationError naming every missing required field."""
    missing = missing_fields(payload, required)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def optional_text(value: object) -> str | None:
    """Return a stripped string, or None for empty input."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_iso_date(value: object, field_name: str) -> date:
    """Parse a YYYY-MM-DD string."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD)") from exc


def check_choice(value: object, choices: frozenset[str], field_name: str) -> str:
    """Return value if it is one of the allowed choices."""
    if not isinstance(value, str) or value not in choices:
        allowed = ", ".join(sorted(choices))
        raise ValidationError(f"{field_name} must be one of: {allowed}")
    return value
