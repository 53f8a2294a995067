"""Milk record endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request, status

from cattle_keeper.api.auth import acting_user, require_api_key
from cattle_keeper.api.schemas import MilkCreate
from cattle_keeper.services.activity import describe_milk_added, describe_milk_deleted

if TYPE_CHECKING:
    from cattle_keeper.containers import AppContainer
    from cattle_keeper.domain.milk import ProductionSummary

router = APIRouter(
    prefix="/milk", tags=["milk"], dependencies=[Depends(require_api_key)]
)


@router.get("")
async def list_milk(
    request: Request,
    cow: str | None = None,
    on_date: str | None = Query(default=None, alias="date"),
) -> dict[str, object]:
    """Return milk records, newest first, optionally filtered."""
    container: AppContainer = request.app.state.container
    records = container.milk_service.list_records(cow, on_date)
    return {"success": True, "data": [record.to_payload() for record in records]}


@router.get("/summary")
async def milk_summary(
    request: Request,
    cow: str | None = None,
    on_date: str | None = Query(default=None, alias="date"),
) -> dict[str, object]:
    """Return daily production totals for the filtered records."""
    container: AppContainer = request.app.state.container
    summary = container.milk_service.summarize(cow, on_date)
    return {"success": True, "data": _summary_payload(summary)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_milk(
    body: MilkCreate,
    request: Request,
    user: str | None = Depends(acting_user),
) -> dict[str, object]:
    """Create a milk record; the daily total is computed server-side."""
    container: AppContainer = request.app.state.container
    record = container.milk_service.create_record(body.payload())
    container.activity_service.log(
        user or record.added_by,
        "add",
        "milk",
        record.cow_name,
        describe_milk_added(
            record.cow_name, record.date, record.morning_amount, record.evening_amount
        ),
    )
    return {"success": True, "data": record.to_payload()}


@router.delete("/{record_id}")
async def delete_milk(
    record_id: str,
    request: Request,
    user: str | None = Depends(acting_user),
) -> dict[str, object]:
    """Delete a milk record."""
    container: AppContainer = request.app.state.container
    record = container.milk_service.delete_record(record_id)
    container.activity_service.log(
        user,
        "delete",
        "milk",
        record.cow_name,
        describe_milk_deleted(record.cow_name, record.date, record.total_daily),
    )
    return {"success": True, "message": "Milk record deleted successfully"}


def _summary_payload(summary: ProductionSummary) -> dict[str, object]:
    return {
        "recordCount": summary.record_count,
        "total": round(summary.total, 2),
        "average": round(summary.average, 2),
        "days": [
            {
                "date": day.date,
                "total": round(day.total, 2),
                "cows": [{"name": cow.name, "amount": cow.amount} for cow in day.cows],
            }
            for day in summary.days
        ],
    }
