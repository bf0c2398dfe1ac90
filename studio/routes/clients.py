from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, HTTPException, Query

from studio.application import get_studio_service
from studio.core.validation import ValidationError

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/top")
async def get_top_clients(
    which: Literal["past", "future", "all"] = Query(default="past", alias="filter"),
    limit: int | None = Query(default=None, ge=1),
    today: str | None = Query(default=None),
) -> dict:
    service = get_studio_service()
    return {"items": [item.model_dump() for item in service.top_clients(which, limit, today=today)]}


@router.get("/{client_id}/ledger")
async def get_client_ledger(client_id: str, today: str | None = Query(default=None)) -> dict:
    service = get_studio_service()
    ledger = service.client_ledger(client_id, today=today)
    if ledger is None:
        raise HTTPException(status_code=404, detail="client not found")
    return {
        "summary": ledger["summary"].model_dump(),
        "tier": ledger["tier"],
        "bookings": [item.model_dump() for item in ledger["bookings"]],
        "history": [item.model_dump() for item in ledger["history"]],
    }


@router.post("/payments")
async def add_client_payment(payload: dict, today: str | None = Query(default=None)) -> dict:
    service = get_studio_service()
    try:
        record = service.add_client_payment(payload, today=today)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors) from exc
    return record.model_dump()
