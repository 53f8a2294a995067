"""Cattle endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status

from cattle_keeper.api.auth import acting_user, require_api_key
from cattle_keeper.api.schemas import BreedingUpdate, CattleCreate, CattleUpdate
from cattle_keeper.services.activity import (
    describe_cattle_added,
    describe_cattle_deleted,
    describe_cattle_edited,
)
from cattle_keeper.services.cattle import breeding_from_payload, patch_from_payload
from cattle_keeper.services.derived import format_age

if TYPE_CHECKING:
    from cattle_keeper.containers import AppContainer
    from cattle_keeper.domain.cattle import CattleRecord

router = APIRouter(
    prefix="/cattle", tags=["cattle"], dependencies=[Depends(require_api_key)]
)

GENERIC_EDIT_LABEL = "Details"


@router.get("")
async def list_cattle(
    request: Request, search: str | None = None, sex: str | None = None
) -> dict[str, object]:
    """Return cattle ordered by name, optionally searched and filtered by sex."""
    container: AppContainer = request.app.state.container
    records = container.cattle_service.list_cattle(search, sex)
    today = _today(container)
    return {
        "success": True,
        "data": [_cattle_payload(record, today) for record in records],
    }


@router.get("/{cattle_id}")
async def get_cattle(cattle_id: str, request: Request) -> dict[str, object]:
    """Return one cattle record."""
    container: AppContainer = request.app.state.container
    record = container.cattle_service.get_cattle(cattle_id)
    return {"success": True, "data": _cattle_payload(record, _today(container))}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_cattle(
    body: CattleCreate,
    request: Request,
    user: str | None = Depends(acting_user),
) -> dict[str, object]:
    """Create a cattle record and log the addition."""
    container: AppContainer = request.app.state.container
    record = container.cattle_service.create_cattle(body.payload())
    container.activity_service.log(
        user or record.created_by,
        "add",
        "cattle",
        record.name,
        describe_cattle_added(record.sex, record.breed, record.name),
    )
    return {"success": True, "data": _cattle_payload(record, _today(container))}


@router.api_route("/{cattle_id}", methods=["PUT", "PATCH"])
async def update_cattle(
    cattle_id: str,
    body: CattleUpdate,
    request: Request,
    user: str | None = Depends(acting_user),
) -> dict[str, object]:
    """Apply a partial update; only the fields sent are changed."""
    container: AppContainer = request.app.state.container
    patch = patch_from_payload(body.payload())
    record = container.cattle_service.update_cattle(cattle_id, patch)
    container.activity_service.log(
        user or patch.last_edited_by,
        "edit",
        "cattle",
        record.name,
        describe_cattle_edited(
            patch.last_edited_field or GENERIC_EDIT_LABEL, record.name
        ),
    )
    return {"success": True, "data": _cattle_payload(record, _today(container))}


@router.put("/{cattle_id}/breeding")
async def edit_breeding_info(
    cattle_id: str,
    body: BreedingUpdate,
    request: Request,
    user: str | None = Depends(acting_user),
) -> dict[str, object]:
    """Replace the breeding values in place and record which ones changed."""
    container: AppContainer = request.app.state.container
    editor = user or body.last_edited_by
    record = container.cattle_service.edit_breeding_info(
        cattle_id,
        breeding_from_payload(body.payload()),
        editor=editor,
        image_url=body.image_url,
    )
    container.activity_service.log(
        editor,
        "edit",
        "cattle",
        record.name,
        describe_cattle_edited(
            record.last_edited_field or GENERIC_EDIT_LABEL, record.name
        ),
    )
    return {"success": True, "data": _cattle_payload(record, _today(container))}


@router.delete("/{cattle_id}")
async def delete_cattle(
    cattle_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    keep_image: bool = Query(default=False, alias="keepImage"),
    user: str | None = Depends(acting_user),
) -> dict[str, object]:
    """Delete a cattle record; its photo is removed after the response."""
    container: AppContainer = request.app.state.container
    record = container.cattle_service.delete_cattle(
        cattle_id, defer=background_tasks.add_task, cleanup=not keep_image
    )
    container.activity_service.log(
        user,
        "delete",
        "cattle",
        record.name,
        describe_cattle_deleted(record.name, record.breed),
    )
    return {"success": True, "message": "Cattle record deleted successfully"}


def _today(container: AppContainer) -> date:
    return datetime.now(tz=ZoneInfo(container.settings.timezone)).date()


def _cattle_payload(record: CattleRecord, today: date) -> dict[str, object]:
    payload = record.to_payload()
    try:
        born = date.fromisoformat(record.date_of_birth)
    except ValueError:
        return payload
    payload["age"] = format_age(born, today)
    return payload
