"""Application service layer composing record snapshots into views."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from studio.application.reconciliation import ReconciliationService
from studio.core import clients as client_engine
from studio.core import finance, schedule, workflow
from studio.core.ledger import STAFF_LEDGER, events_for_staff, expense_totals
from studio.core.payment_status import booking_payment_status
from studio.core.schema import (
    BookingOverview,
    ClientPaymentRecord,
    ExpenseSummary,
    FinanceSummary,
    LedgerSummary,
    MediumProgress,
    OverdueBooking,
    ScheduleReport,
    StaffPaymentRecord,
    StudioSnapshot,
)
from studio.core.settings import get_settings
from studio.core.validation import validate_client_payment, validate_staff_payment
from studio.domain import AmountEdit, BatchResult, ReconcileOutcome
from studio.infrastructure import InMemoryStudioRepository, StudioRepository

logger = logging.getLogger("studio.service")


class StudioService:
    """Coordinates studio use cases over the current record snapshot."""

    def __init__(self, repository: StudioRepository) -> None:
        self._repository = repository
        self._reconciliation = ReconciliationService(repository)

    # ------------------------------------------------------------------
    # snapshots
    # ------------------------------------------------------------------
    def snapshot(self) -> StudioSnapshot:
        return self._repository.snapshot()

    def load_snapshot(self, data: StudioSnapshot | Mapping[str, Any]) -> StudioSnapshot:
        snapshot = data if isinstance(data, StudioSnapshot) else StudioSnapshot(**data)
        self._repository.load_snapshot(snapshot)
        logger.info(
            f"Loaded snapshot: {len(snapshot.bookings)} bookings, {len(snapshot.events)} events, "
            f"{len(snapshot.staff_payments)} staff payments, {len(snapshot.client_payments)} client payments"
        )
        return snapshot

    # ------------------------------------------------------------------
    # staff ledger
    # ------------------------------------------------------------------
    def top_staff(self, n: int | None = None) -> list[LedgerSummary]:
        snap = self.snapshot()
        return STAFF_LEDGER.top_n(snap.staff, snap.staff_payments, n or get_settings().top_n)

    def staff_ledger(self, staff_id: str) -> dict[str, object] | None:
        snap = self.snapshot()
        member = next((item for item in snap.staff if item.id == staff_id), None)
        if member is None:
            return None
        return {
            "summary": STAFF_LEDGER.summary(member.id, member.name, snap.staff_payments),
            "events": events_for_staff(member.id, snap.events, snap.assignments, snap.staff_payments),
            "history": STAFF_LEDGER.payment_history(member.id, snap.staff_payments),
        }

    def add_staff_payment(self, entry: Mapping[str, Any], *, today: date | str | None = None) -> StaffPaymentRecord:
        validate_staff_payment(entry, today=today)
        record = dict(entry)
        if record.get("type") != "made":
            record["payment_method"] = None
        record["remarks"] = record.get("remarks") or None
        record["event_id"] = record.get("event_id") or None
        created = self._repository.add_staff_payment(record)
        logger.info(f"Recorded {created.type} payment {created.id} for staff {created.staff_id}")
        return created

    async def set_agreed_amount(
        self,
        staff_id: str,
        event_id: str,
        amount: object,
        *,
        today: date | str | None = None,
    ) -> ReconcileOutcome:
        return await self._reconciliation.reconcile(staff_id, event_id, amount, today=today)

    async def save_agreed_amounts(
        self,
        edits: Mapping[tuple[str, str], object] | Iterable[AmountEdit],
        *,
        today: date | str | None = None,
    ) -> BatchResult:
        return await self._reconciliation.save_all(edits, today=today)

    # ------------------------------------------------------------------
    # client ledger
    # ------------------------------------------------------------------
    def top_clients(
        self,
        which: client_engine.OutstandingFilter = "past",
        n: int | None = None,
        *,
        today: date | str | None = None,
    ) -> list[Any]:
        snap = self.snapshot()
        return client_engine.top_clients(
            snap.clients,
            snap.bookings,
            snap.events,
            snap.client_payments,
            which=which,
            n=n or get_settings().top_n,
            today=today,
        )

    def client_ledger(self, client_id: str, *, today: date | str | None = None) -> dict[str, object] | None:
        snap = self.snapshot()
        client = next((item for item in snap.clients if item.id == client_id), None)
        if client is None:
            return None
        summary = client_engine.client_summary(client, snap.bookings, snap.events, snap.client_payments, today=today)
        return {
            "summary": summary,
            "tier": client_engine.outstanding_tier(summary.outstanding, get_settings().client_outstanding_warning),
            "bookings": client_engine.booking_rows(
                client.id, snap.bookings, snap.events, snap.client_payments, today=today
            ),
            "history": client_engine.client_history(client.id, snap.client_payments),
        }

    def add_client_payment(self, entry: Mapping[str, Any], *, today: date | str | None = None) -> ClientPaymentRecord:
        validate_client_payment(entry, today=today)
        record = dict(entry)
        if not record.get("client_id"):
            booking = next((item for item in self.snapshot().bookings if item.id == record["booking_id"]), None)
            record["client_id"] = booking.client_id if booking else None
        record["remarks"] = record.get("remarks") or None
        created = self._repository.add_client_payment(record)
        logger.info(f"Recorded {created.payment_status} payment {created.id} for booking {created.booking_id}")
        return created

    # ------------------------------------------------------------------
    # bookings & production
    # ------------------------------------------------------------------
    def booking_overview(self, booking_id: str, *, today: date | str | None = None) -> BookingOverview | None:
        snap = self.snapshot()
        booking = next((item for item in snap.bookings if item.id == booking_id), None)
        if booking is None:
            return None
        settings = get_settings()
        events = sorted((event for event in snap.events if event.booking_id == booking.id), key=lambda e: e.event_date)
        flows = workflow.workflows_for_booking(booking.id, events, snap.workflows)
        progress = workflow.overall_progress(flows)
        upcoming = workflow.next_event(events, today=today)
        return BookingOverview(
            booking_id=booking.id,
            name=booking.display_name,
            status=workflow.booking_status(events, flows, today=today),
            progress=progress,
            progress_tier=workflow.progress_tier(progress),
            payment=booking_payment_status(
                booking,
                snap.client_payments,
                currency_prefix=settings.currency_prefix,
                warning_ratio=settings.warning_ratio,
            ),
            event_count=len(events),
            next_event_date=upcoming.event_date if upcoming else None,
        )

    def list_bookings(self, *, today: date | str | None = None) -> list[BookingOverview]:
        overviews = [self.booking_overview(booking.id, today=today) for booking in self.snapshot().bookings]
        return [item for item in overviews if item is not None]

    def event_progress(self, event_id: str) -> dict[str, MediumProgress] | None:
        snap = self.snapshot()
        if not any(event.id == event_id for event in snap.events):
            return None
        flow = next((item for item in snap.workflows if item.event_id == event_id), None)
        return workflow.medium_progress(flow)

    # ------------------------------------------------------------------
    # schedule & expenses
    # ------------------------------------------------------------------
    def schedule_report(self, coverage: Mapping[str, int] | None = None) -> ScheduleReport:
        snap = self.snapshot()
        policy = dict(coverage) if coverage is not None else get_settings().coverage
        active = [member for member in snap.staff if member.status == "active"]
        roster = active if snap.staff else None
        return schedule.detect(snap.events, snap.assignments, policy, staff=roster)

    def pending_data(self, *, today: date | str | None = None) -> list[Any]:
        snap = self.snapshot()
        return schedule.data_not_received(snap.events, snap.assignments, today=today)

    def expense_summary(self) -> ExpenseSummary:
        return expense_totals(self.snapshot().expenses)

    def finance_summary(
        self,
        tab: finance.FinanceTab = "all",
        time_range: finance.TimeRange = "all-time",
        *,
        today: date | str | None = None,
    ) -> FinanceSummary:
        snap = self.snapshot()
        start, end = finance.period_bounds(time_range, today=today)
        return finance.finance_summary(
            snap.bookings,
            snap.events,
            snap.client_payments,
            snap.expenses,
            tab=tab,
            start=start,
            end=end,
            today=today,
        )

    def overdue_payments(
        self,
        period: finance.OverduePeriod = "6months",
        *,
        today: date | str | None = None,
    ) -> list[OverdueBooking]:
        snap = self.snapshot()
        return finance.overdue_bookings(
            snap.clients,
            snap.bookings,
            snap.events,
            snap.client_payments,
            since=finance.overdue_since(period, today=today),
            today=today,
        )

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._repository.reset()


_repository = InMemoryStudioRepository()
_service = StudioService(_repository)


def get_studio_service() -> StudioService:
    """Return the singleton studio service for the process."""

    return _service


def reset_studio_state() -> None:
    """Reset the in-memory store (used in tests)."""

    _service.reset()
