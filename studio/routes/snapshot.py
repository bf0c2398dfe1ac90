from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from studio.application import get_studio_service

router = APIRouter(prefix="/snapshot", tags=["snapshot"])


@router.put("")
async def load_snapshot(payload: dict) -> dict:
    """Replace the in-memory records with the supplied collections."""
    service = get_studio_service()
    try:
        snapshot = service.load_snapshot(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
    return {
        "bookings": len(snapshot.bookings),
        "events": len(snapshot.events),
        "staff": len(snapshot.staff),
        "staff_payments": len(snapshot.staff_payments),
        "client_payments": len(snapshot.client_payments),
    }


@router.get("")
async def get_snapshot() -> dict:
    service = get_studio_service()
    return service.snapshot().model_dump()
