import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from studio.core.schedule import data_not_received, detect, find_conflicts, find_shortages
from studio.core.schema import Event, Staff, StaffAssignment


def _event(event_id, event_date, **extra):
    return Event(id=event_id, booking_id="b1", event_name=event_id, event_date=event_date, **extra)


def _assign(assignment_id, event_id, staff_id, role="photographer", **extra):
    return StaffAssignment(id=assignment_id, event_id=event_id, staff_id=staff_id, role=role, **extra)


def test_same_staff_on_two_events_same_day_conflicts():
    events = [
        _event("E1", "2024-06-10", time_slot="morning", venue="Temple"),
        _event("E2", "2024-06-10", time_slot="evening", venue="Hall"),
    ]
    assignments = [_assign("a1", "E1", "S"), _assign("a2", "E2", "S")]

    conflicts = find_conflicts(events, assignments)

    assert len(conflicts) == 1
    assert conflicts[0].staff_id == "S"
    assert conflicts[0].date == "2024-06-10"
    assert conflicts[0].event_ids == ["E1", "E2"]
    assert conflicts[0].assignment_ids == ["a1", "a2"]


def test_double_assignment_to_one_event_is_not_a_conflict():
    events = [_event("E1", "2024-06-10")]
    assignments = [_assign("a1", "E1", "S"), _assign("a2", "E1", "S", role="videographer")]

    assert find_conflicts(events, assignments) == []


def test_different_days_and_unknown_events_do_not_conflict():
    events = [_event("E1", "2024-06-10"), _event("E2", "2024-06-11")]
    assignments = [_assign("a1", "E1", "S"), _assign("a2", "E2", "S"), _assign("a3", "ghost", "S")]

    assert find_conflicts(events, assignments) == []


def test_datetime_strings_are_compared_by_calendar_date():
    events = [_event("E1", "2024-06-10T08:00:00"), _event("E2", "2024-06-10T19:30:00Z")]
    assignments = [_assign("a1", "E1", "S"), _assign("a2", "E2", "S")]

    assert [conflict.date for conflict in find_conflicts(events, assignments)] == ["2024-06-10"]


def test_conflicts_are_ordered_by_date_then_staff():
    events = [
        _event("E1", "2024-07-01"),
        _event("E2", "2024-07-01"),
        _event("E3", "2024-06-01"),
        _event("E4", "2024-06-01"),
    ]
    assignments = [
        _assign("a1", "E1", "T"),
        _assign("a2", "E2", "T"),
        _assign("a3", "E1", "S"),
        _assign("a4", "E2", "S"),
        _assign("a5", "E3", "Z"),
        _assign("a6", "E4", "Z"),
    ]

    conflicts = find_conflicts(events, assignments)

    assert [(conflict.date, conflict.staff_id) for conflict in conflicts] == [
        ("2024-06-01", "Z"),
        ("2024-07-01", "S"),
        ("2024-07-01", "T"),
    ]


def test_shortage_against_default_coverage():
    events = [_event("E1", "2024-06-10"), _event("E2", "2024-06-12")]
    assignments = [_assign("a1", "E2", "S")]

    shortages = find_shortages(events, assignments, {"photographer": 1})

    assert [shortage.event_id for shortage in shortages] == ["E1"]
    assert shortages[0].missing == {"photographer": 1}
    assert shortages[0].assigned == {"photographer": 0}


def test_event_requirements_override_coverage():
    events = [
        _event("E1", "2024-06-10", required_roles={"photographer": 2, "videographer": 1}),
        _event("E2", "2024-06-11", photographers_required=0, videographers_required=1),
    ]
    assignments = [
        _assign("a1", "E1", "S1"),
        _assign("a2", "E1", "S2", role="videographer"),
        _assign("a3", "E2", "S3", role="videographer"),
    ]

    shortages = find_shortages(events, assignments, {"photographer": 1})

    assert len(shortages) == 1
    assert shortages[0].event_id == "E1"
    assert shortages[0].missing == {"photographer": 1}
    assert shortages[0].required == {"photographer": 2, "videographer": 1}


def test_roster_role_takes_precedence_over_assignment_role():
    events = [_event("E1", "2024-06-10")]
    assignments = [_assign("a1", "E1", "S1", role="photographer")]
    staff = [Staff(id="S1", name="Ravi", role="editor")]

    assert find_shortages(events, assignments, {"photographer": 1}) == []
    shortages = find_shortages(events, assignments, {"photographer": 1}, staff=staff)
    assert shortages[0].assigned == {"photographer": 0}


def test_detect_combines_both_checks():
    events = [_event("E1", "2024-06-10"), _event("E2", "2024-06-10")]
    assignments = [_assign("a1", "E1", "S"), _assign("a2", "E2", "S")]

    report = detect(events, assignments, {"photographer": 1, "videographer": 1})

    assert len(report.conflicts) == 1
    assert [shortage.missing for shortage in report.shortages] == [{"videographer": 1}, {"videographer": 1}]


def test_data_not_received_lists_past_events_only():
    events = [_event("E1", "2024-06-01"), _event("E2", "2024-06-15"), _event("E3", "2024-07-01")]
    assignments = [
        _assign("a1", "E1", "S1"),
        _assign("a2", "E1", "S2", data_received=True),
        _assign("a3", "E2", "S1"),
        _assign("a4", "E3", "S1"),
    ]

    pending = data_not_received(events, assignments, today="2024-06-15")

    assert [assignment.id for assignment in pending] == ["a1"]
