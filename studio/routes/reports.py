from __future__ import annotations

from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Query

from studio.application import get_studio_service

router = APIRouter(tags=["reports"])


@router.get("/schedule/alerts")
async def get_schedule_alerts() -> dict:
    service = get_studio_service()
    return service.schedule_report().model_dump()


@router.get("/schedule/data-pending")
async def get_pending_data(today: str | None = Query(default=None)) -> dict:
    service = get_studio_service()
    return {"items": [item.model_dump() for item in service.pending_data(today=today)]}


@router.get("/expenses/summary")
async def get_expense_summary() -> dict:
    service = get_studio_service()
    return service.expense_summary().model_dump()


@router.get("/finance/summary")
async def get_finance_summary(
    tab: Literal["active", "past", "all"] = Query(default="all"),
    time_range: Literal["this-month", "this-quarter", "this-year", "all-time"] = Query(default="all-time", alias="range"),
    today: str | None = Query(default=None),
) -> dict:
    service = get_studio_service()
    return service.finance_summary(tab, time_range, today=today).model_dump()


@router.get("/finance/overdue")
async def get_overdue_payments(
    period: Literal["3months", "6months", "1year", "all"] = Query(default="6months"),
    today: str | None = Query(default=None),
) -> dict:
    service = get_studio_service()
    items = service.overdue_payments(period, today=today)
    return {
        "items": [item.model_dump() for item in items],
        "total_due": sum((item.due for item in items), Decimal("0")),
    }
