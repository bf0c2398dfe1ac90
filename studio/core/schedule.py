from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from studio.core.dates import today_string
from studio.core.schema import Conflict, Event, ScheduleReport, Shortage, Staff, StaffAssignment


def _assignment_role(assignment: StaffAssignment, roster: Mapping[str, Staff] | None) -> str:
    if roster is not None:
        member = roster.get(assignment.staff_id)
        if member is not None and member.role:
            return member.role
    return assignment.role


def find_conflicts(events: Sequence[Event], assignments: Iterable[StaffAssignment]) -> list[Conflict]:
    """Staff members assigned to more than one event on the same calendar date."""

    event_dates = {event.id: event.event_date for event in events}
    grouped: dict[tuple[str, str], list[StaffAssignment]] = {}
    for assignment in assignments:
        event_date = event_dates.get(assignment.event_id)
        if event_date is None:
            continue
        grouped.setdefault((assignment.staff_id, event_date), []).append(assignment)

    conflicts: list[Conflict] = []
    for (staff_id, event_date), items in grouped.items():
        event_ids = list(dict.fromkeys(item.event_id for item in items))
        if len(event_ids) < 2:
            continue
        conflicts.append(
            Conflict(
                staff_id=staff_id,
                date=event_date,
                event_ids=event_ids,
                assignment_ids=[item.id for item in items],
            )
        )
    conflicts.sort(key=lambda conflict: (conflict.date, conflict.staff_id))
    return conflicts


def find_shortages(
    events: Sequence[Event],
    assignments: Iterable[StaffAssignment],
    coverage: Mapping[str, int],
    *,
    staff: Iterable[Staff] | None = None,
) -> list[Shortage]:
    """Events whose assigned crew falls below ``coverage`` or their own requirements."""

    roster = {member.id: member for member in staff} if staff is not None else None
    assigned_by_event: dict[str, dict[str, int]] = {}
    for assignment in assignments:
        role = _assignment_role(assignment, roster)
        counts = assigned_by_event.setdefault(assignment.event_id, {})
        counts[role] = counts.get(role, 0) + 1

    shortages: list[Shortage] = []
    for event in events:
        required = {**coverage, **event.required_roles}
        counts = assigned_by_event.get(event.id, {})
        missing = {
            role: minimum - counts.get(role, 0)
            for role, minimum in required.items()
            if counts.get(role, 0) < minimum
        }
        if missing:
            shortages.append(
                Shortage(
                    event_id=event.id,
                    event_date=event.event_date,
                    required={role: minimum for role, minimum in required.items() if minimum > 0},
                    assigned={role: counts.get(role, 0) for role in required},
                    missing=missing,
                )
            )
    shortages.sort(key=lambda shortage: shortage.event_date)
    return shortages


def detect(
    events: Sequence[Event],
    assignments: Sequence[StaffAssignment],
    coverage: Mapping[str, int],
    *,
    staff: Iterable[Staff] | None = None,
) -> ScheduleReport:
    return ScheduleReport(
        conflicts=find_conflicts(events, assignments),
        shortages=find_shortages(events, assignments, coverage, staff=staff),
    )


def data_not_received(
    events: Sequence[Event],
    assignments: Iterable[StaffAssignment],
    *,
    today: date | str | None = None,
) -> list[StaffAssignment]:
    """Assignments on past events whose footage has not been handed in yet."""

    today_str = today_string(today)
    past = {event.id for event in events if event.event_date < today_str}
    return [assignment for assignment in assignments if assignment.event_id in past and not assignment.data_received]
