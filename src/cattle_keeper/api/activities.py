"""Activity log endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Request, status

from cattle_keeper.api.auth import require_api_key
from cattle_keeper.api.schemas import ActivityCreate

if TYPE_CHECKING:
    from cattle_keeper.containers import AppContainer

router = APIRouter(
    prefix="/activities",
    tags=["activities"],
    dependencies=[Depends(require_api_key)],
)


@router.get("")
async def list_activities(request: Request) -> dict[str, object]:
    """Return all entries, newest first."""
    container: AppContainer = request.app.state.container
    entries = container.activity_service.list_entries()
    return {"success": True, "data": [entry.to_payload() for entry in entries]}


@router.get("/days")
async def activity_days(request: Request) -> dict[str, object]:
    """Return entries grouped by calendar day in the configured timezone."""
    container: AppContainer = request.app.state.container
    tz = ZoneInfo(container.settings.timezone)
    days = container.activity_service.group_by_day(tz)
    return {
        "success": True,
        "data": [
            {
                "date": day.day.isoformat(),
                "entries": [entry.to_payload() for entry in day.entries],
            }
            for day in days
        ],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_activity(body: ActivityCreate, request: Request) -> dict[str, object]:
    """Append one activity entry."""
    container: AppContainer = request.app.state.container
    entry = container.activity_service.record(body.payload())
    return {"success": True, "data": entry.to_payload()}
