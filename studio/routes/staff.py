from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from studio.application import ReconciliationError, get_studio_service
from studio.core.validation import ValidationError
from studio.domain import AmountEdit, ReconcileOutcome

router = APIRouter(prefix="/staff", tags=["staff"])


def _serialise_outcome(outcome: ReconcileOutcome) -> dict:
    return {
        "staff_id": outcome.staff_id,
        "event_id": outcome.event_id,
        "action": outcome.action,
        "amount": outcome.amount,
        "record_id": outcome.record_id,
        "removed_ids": outcome.removed_ids,
        "stale_ids": outcome.stale_ids,
        "error": outcome.error,
    }


@router.get("/ledger")
async def get_top_staff(limit: int | None = Query(default=None, ge=1)) -> dict:
    service = get_studio_service()
    return {"items": [item.model_dump() for item in service.top_staff(limit)]}


@router.get("/{staff_id}/ledger")
async def get_staff_ledger(staff_id: str) -> dict:
    service = get_studio_service()
    ledger = service.staff_ledger(staff_id)
    if ledger is None:
        raise HTTPException(status_code=404, detail="staff member not found")
    return {
        "summary": ledger["summary"].model_dump(),
        "events": [item.model_dump() for item in ledger["events"]],
        "history": [item.model_dump() for item in ledger["history"]],
    }


@router.post("/{staff_id}/payments")
async def add_staff_payment(staff_id: str, payload: dict, today: str | None = Query(default=None)) -> dict:
    service = get_studio_service()
    entry = {**payload, "staff_id": staff_id}
    try:
        record = service.add_staff_payment(entry, today=today)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors) from exc
    return record.model_dump()


@router.put("/{staff_id}/events/{event_id}/agreed")
async def set_agreed_amount(staff_id: str, event_id: str, payload: dict, today: str | None = Query(default=None)) -> dict:
    if "amount" not in payload:
        raise HTTPException(status_code=400, detail="amount is required")
    service = get_studio_service()
    try:
        outcome = await service.set_agreed_amount(staff_id, event_id, payload["amount"], today=today)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors) from exc
    except ReconciliationError as exc:
        raise HTTPException(
            status_code=502,
            detail={"message": str(exc), "stage": exc.stage, "stale_ids": exc.stale_ids},
        ) from exc
    return _serialise_outcome(outcome)


@router.post("/agreed-amounts")
async def save_agreed_amounts(payload: dict, today: str | None = Query(default=None)) -> dict:
    """Apply a batch of pending agreed-amount edits, one pair after another."""
    items = payload.get("edits")
    if not isinstance(items, list) or not items:
        raise HTTPException(status_code=400, detail="edits must be a non-empty list")
    edits: list[AmountEdit] = []
    for item in items:
        if not isinstance(item, dict) or not item.get("staff_id") or not item.get("event_id") or "amount" not in item:
            raise HTTPException(status_code=400, detail="each edit needs staff_id, event_id and amount")
        edits.append(AmountEdit(str(item["staff_id"]), str(item["event_id"]), item["amount"]))

    service = get_studio_service()
    result = await service.save_agreed_amounts(edits, today=today)
    return {
        "items": [_serialise_outcome(outcome) for outcome in result.outcomes],
        "succeeded": len(result.succeeded),
        "failed": len(result.failed),
    }
