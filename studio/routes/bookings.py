from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from studio.application import get_studio_service

router = APIRouter(tags=["bookings"])


@router.get("/bookings")
async def list_bookings(today: str | None = Query(default=None)) -> dict:
    service = get_studio_service()
    return {"items": [item.model_dump() for item in service.list_bookings(today=today)]}


@router.get("/bookings/{booking_id}")
async def get_booking(booking_id: str, today: str | None = Query(default=None)) -> dict:
    service = get_studio_service()
    overview = service.booking_overview(booking_id, today=today)
    if overview is None:
        raise HTTPException(status_code=404, detail="booking not found")
    return overview.model_dump()


@router.get("/events/{event_id}/progress")
async def get_event_progress(event_id: str) -> dict:
    service = get_studio_service()
    progress = service.event_progress(event_id)
    if progress is None:
        raise HTTPException(status_code=404, detail="event not found")
    return {"event_id": event_id, "media": {medium: item.model_dump() for medium, item in progress.items()}}
