"""Infrastructure layer for studio record persistence."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Protocol

from studio.core.schema import ClientPaymentRecord, StaffPaymentRecord, StudioSnapshot
from studio.domain import StudioState


class AgreedRecordStore(Protocol):
    """Storage operations needed to reconcile agreed amounts.

    ``list_agreed_records`` returns the pair's agreed records in store order.
    """

    async def list_agreed_records(self, staff_id: str, event_id: str) -> list[StaffPaymentRecord]: ...

    async def update_amount(self, record_id: str, amount: Decimal) -> None: ...

    async def delete_record(self, record_id: str) -> None: ...

    async def insert_agreed_record(
        self,
        staff_id: str,
        event_id: str,
        amount: Decimal,
        payment_date: str,
    ) -> StaffPaymentRecord: ...


class StudioRepository(AgreedRecordStore, Protocol):
    """Persistence contract for the studio record collections."""

    def snapshot(self) -> StudioSnapshot: ...

    def load_snapshot(self, snapshot: StudioSnapshot) -> None: ...

    def add_staff_payment(self, entry: dict[str, Any]) -> StaffPaymentRecord: ...

    def add_client_payment(self, entry: dict[str, Any]) -> ClientPaymentRecord: ...

    def reset(self) -> None: ...


class InMemoryStudioRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._state = StudioState()
        self._record_counter = 0

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _next_id(self, prefix: str) -> str:
        self._record_counter += 1
        return f"{prefix}-{self._record_counter:05d}"

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    # ------------------------------------------------------------------
    # snapshots
    # ------------------------------------------------------------------
    def snapshot(self) -> StudioSnapshot:
        state = self._state
        return StudioSnapshot(
            clients=list(state.clients),
            bookings=list(state.bookings),
            events=list(state.events),
            staff=list(state.staff),
            assignments=list(state.assignments),
            workflows=list(state.workflows),
            client_payments=list(state.client_payments),
            staff_payments=list(state.staff_payments.values()),
            expenses=list(state.expenses),
        )

    def load_snapshot(self, snapshot: StudioSnapshot) -> None:
        self._state = StudioState(
            clients=list(snapshot.clients),
            bookings=list(snapshot.bookings),
            events=list(snapshot.events),
            staff=list(snapshot.staff),
            assignments=list(snapshot.assignments),
            workflows=list(snapshot.workflows),
            client_payments=list(snapshot.client_payments),
            staff_payments={record.id: record for record in snapshot.staff_payments},
            expenses=list(snapshot.expenses),
        )

    # ------------------------------------------------------------------
    # payment entry
    # ------------------------------------------------------------------
    def add_staff_payment(self, entry: dict[str, Any]) -> StaffPaymentRecord:
        record = StaffPaymentRecord(id=self._next_id("spr"), created_at=self._now(), **entry)
        self._state.staff_payments[record.id] = record
        return record

    def add_client_payment(self, entry: dict[str, Any]) -> ClientPaymentRecord:
        record = ClientPaymentRecord(id=self._next_id("cpr"), created_at=self._now(), **entry)
        self._state.client_payments.append(record)
        return record

    # ------------------------------------------------------------------
    # agreed record store
    # ------------------------------------------------------------------
    async def list_agreed_records(self, staff_id: str, event_id: str) -> list[StaffPaymentRecord]:
        return [
            record
            for record in self._state.staff_payments.values()
            if record.staff_id == staff_id and record.event_id == event_id and record.type == "agreed"
        ]

    async def update_amount(self, record_id: str, amount: Decimal) -> None:
        record = self._state.staff_payments.get(record_id)
        if record is None:
            raise KeyError(record_id)
        self._state.staff_payments[record_id] = record.model_copy(update={"amount": amount})

    async def delete_record(self, record_id: str) -> None:
        if self._state.staff_payments.pop(record_id, None) is None:
            raise KeyError(record_id)

    async def insert_agreed_record(
        self,
        staff_id: str,
        event_id: str,
        amount: Decimal,
        payment_date: str,
    ) -> StaffPaymentRecord:
        return self.add_staff_payment(
            {
                "staff_id": staff_id,
                "event_id": event_id,
                "type": "agreed",
                "amount": amount,
                "payment_date": payment_date,
            }
        )

    def reset(self) -> None:
        self._state = StudioState()
        self._record_counter = 0
