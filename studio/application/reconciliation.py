"""Keeps at most one agreed-amount record per (staff, event) pair.

Editing a pair's agreed amount lists the pair's existing ``agreed`` records,
keeps the oldest as the canonical record and deletes the others. Earlier
duplicate inserts therefore disappear on the next edit of that pair.

There is no version check between the read and the writes. A concurrent
writer outside this process can still slip a record in between; the next
edit of the pair cleans it up.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal, InvalidOperation

from studio.core.dates import today_string
from studio.core.money import format_currency, to_amount
from studio.core.schema import StaffPaymentRecord
from studio.core.settings import get_settings
from studio.core.validation import ValidationError
from studio.domain import AmountEdit, BatchResult, ReconcileOutcome
from studio.infrastructure import AgreedRecordStore

logger = logging.getLogger("studio.reconciliation")

ZERO = Decimal("0")


class ReconciliationError(Exception):
    """A storage call failed while reconciling one pair.

    ``stage`` names the failing step (``read``, ``update``, ``delete`` or
    ``insert``). When ``canonical_written`` is true the new amount is already
    stored and ``stale_ids`` lists duplicates that could not be removed;
    repeating the same edit removes them.
    """

    def __init__(
        self,
        staff_id: str,
        event_id: str,
        stage: str,
        message: str,
        *,
        canonical_written: bool = False,
        record_id: str | None = None,
        stale_ids: Iterable[str] = (),
    ) -> None:
        self.staff_id = staff_id
        self.event_id = event_id
        self.stage = stage
        self.canonical_written = canonical_written
        self.record_id = record_id
        self.stale_ids = list(stale_ids)
        super().__init__(f"{stage} failed for staff {staff_id} / event {event_id}: {message}")


def _coerce_edit_amount(value: object) -> Decimal:
    settings = get_settings()
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError({"amount": "Agreed amount must be a number"}) from None
    if not amount.is_finite() or amount < ZERO:
        raise ValidationError({"amount": "Agreed amount cannot be negative"})
    if amount != ZERO and not (settings.min_payment_amount <= amount <= settings.max_payment_amount):
        low = format_currency(settings.min_payment_amount, settings.currency_prefix)
        high = format_currency(settings.max_payment_amount, settings.currency_prefix)
        raise ValidationError({"amount": f"Amount must be between {low} and {high}"})
    return amount


class ReconciliationService:
    def __init__(self, store: AgreedRecordStore) -> None:
        self._store = store
        self._lock = asyncio.Lock()

    async def reconcile(
        self,
        staff_id: str,
        event_id: str,
        amount: object,
        *,
        today: date | str | None = None,
    ) -> ReconcileOutcome:
        """Make ``amount`` the single agreed amount of the pair; zero removes it."""

        new_amount = _coerce_edit_amount(amount)
        async with self._lock:
            return await self._reconcile(staff_id, event_id, new_amount, today_string(today))

    async def save_all(
        self,
        edits: Mapping[tuple[str, str], object] | Iterable[AmountEdit],
        *,
        today: date | str | None = None,
    ) -> BatchResult:
        """Apply edits one pair at a time; a failed pair does not stop the rest."""

        if isinstance(edits, Mapping):
            pending = [AmountEdit(staff_id, event_id, amount) for (staff_id, event_id), amount in edits.items()]
        else:
            pending = list(edits)

        result = BatchResult()
        for edit in pending:
            try:
                outcome = await self.reconcile(edit.staff_id, edit.event_id, edit.amount, today=today)
            except ValidationError as exc:
                outcome = ReconcileOutcome(
                    staff_id=edit.staff_id,
                    event_id=edit.event_id,
                    action="failed",
                    amount=ZERO,
                    error=str(exc),
                )
            except ReconciliationError as exc:
                outcome = ReconcileOutcome(
                    staff_id=edit.staff_id,
                    event_id=edit.event_id,
                    action="updated" if exc.canonical_written else "failed",
                    amount=to_amount(edit.amount),
                    record_id=exc.record_id,
                    stale_ids=exc.stale_ids,
                    error=str(exc),
                )
            result.outcomes.append(outcome)

        logger.info(
            f"Saved agreed amounts: {len(result.succeeded)} succeeded, {len(result.failed)} failed"
        )
        return result

    # ------------------------------------------------------------------
    # internal steps
    # ------------------------------------------------------------------
    async def _reconcile(self, staff_id: str, event_id: str, amount: Decimal, today: str) -> ReconcileOutcome:
        try:
            records = await self._store.list_agreed_records(staff_id, event_id)
        except Exception as exc:
            logger.error(f"Could not read agreed records for {staff_id}/{event_id}: {exc}", exc_info=True)
            raise ReconciliationError(staff_id, event_id, "read", str(exc)) from exc

        records = sorted(records, key=lambda record: record.created_at or "")

        if amount == ZERO:
            if not records:
                return ReconcileOutcome(staff_id=staff_id, event_id=event_id, action="unchanged", amount=ZERO)
            removed = await self._delete_all(staff_id, event_id, records)
            logger.info(f"Removed {len(removed)} agreed record(s) for {staff_id}/{event_id}")
            return ReconcileOutcome(
                staff_id=staff_id,
                event_id=event_id,
                action="removed",
                amount=ZERO,
                removed_ids=removed,
            )

        if not records:
            try:
                created = await self._store.insert_agreed_record(staff_id, event_id, amount, today)
            except Exception as exc:
                logger.error(f"Could not insert agreed record for {staff_id}/{event_id}: {exc}", exc_info=True)
                raise ReconciliationError(staff_id, event_id, "insert", str(exc)) from exc
            logger.info(f"Created agreed record {created.id} for {staff_id}/{event_id}")
            return ReconcileOutcome(
                staff_id=staff_id,
                event_id=event_id,
                action="created",
                amount=amount,
                record_id=created.id,
            )

        canonical, duplicates = records[0], records[1:]
        if canonical.amount == amount and not duplicates:
            return ReconcileOutcome(
                staff_id=staff_id,
                event_id=event_id,
                action="unchanged",
                amount=amount,
                record_id=canonical.id,
            )

        try:
            await self._store.update_amount(canonical.id, amount)
        except Exception as exc:
            logger.error(f"Could not update agreed record {canonical.id}: {exc}", exc_info=True)
            raise ReconciliationError(
                staff_id,
                event_id,
                "update",
                str(exc),
                record_id=canonical.id,
                stale_ids=[record.id for record in duplicates],
            ) from exc

        removed = await self._delete_all(staff_id, event_id, duplicates, canonical_id=canonical.id)
        if duplicates:
            logger.info(f"Collapsed {len(removed)} duplicate agreed record(s) into {canonical.id}")
        return ReconcileOutcome(
            staff_id=staff_id,
            event_id=event_id,
            action="updated",
            amount=amount,
            record_id=canonical.id,
            removed_ids=removed,
        )

    async def _delete_all(
        self,
        staff_id: str,
        event_id: str,
        records: list[StaffPaymentRecord],
        *,
        canonical_id: str | None = None,
    ) -> list[str]:
        removed: list[str] = []
        stale: list[str] = []
        last_error: Exception | None = None
        for record in records:
            try:
                await self._store.delete_record(record.id)
            except Exception as exc:
                logger.error(f"Could not delete agreed record {record.id}: {exc}", exc_info=True)
                stale.append(record.id)
                last_error = exc
                continue
            removed.append(record.id)

        if stale:
            raise ReconciliationError(
                staff_id,
                event_id,
                "delete",
                f"{len(stale)} record(s) left behind ({last_error})",
                canonical_written=canonical_id is not None,
                record_id=canonical_id,
                stale_ids=stale,
            )
        return removed
