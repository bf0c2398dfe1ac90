"""Booking lifecycle status and production progress.

A booking moves through four stages, derived each time from its events and
their workflows rather than stored:

* ``Shoot Scheduled``: at least one event is dated today or later.
* ``In Progress``: every shoot is behind us but no workflow step is done.
* ``Post-Production``: some step is done but not every workflow is delivered.
* ``Delivered``: there is at least one workflow and all of them are fully
  delivered.

A workflow is fully delivered when the terminal step of each of its four
media is completed or marked not applicable, and at least one of them is
completed. A workflow whose media were all skipped has delivered nothing.
Steps that were never recorded count as neither. Dates are ``YYYY-MM-DD``
strings compared lexicographically.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from studio.core.dates import today_string
from studio.core.schema import (
    MEDIA_STEPS,
    TERMINAL_STEPS,
    BookingStatus,
    Event,
    MediumProgress,
    ProgressTier,
    StepState,
    Workflow,
)

_DONE = (StepState.COMPLETED, StepState.NOT_APPLICABLE)


def is_workflow_fully_delivered(workflow: Workflow) -> bool:
    terminal = [workflow.steps(medium).get(step) for medium, step in TERMINAL_STEPS.items()]
    return all(state in _DONE for state in terminal) and StepState.COMPLETED in terminal


def has_started(workflow: Workflow) -> bool:
    return any(state is StepState.COMPLETED for state in workflow.all_states())


def workflows_for_booking(booking_id: str, events: Iterable[Event], workflows: Iterable[Workflow]) -> list[Workflow]:
    event_ids = {event.id for event in events if event.booking_id == booking_id}
    return [workflow for workflow in workflows if workflow.event_id in event_ids]


def booking_status(
    events: Sequence[Event],
    workflows: Sequence[Workflow],
    *,
    today: date | str | None = None,
) -> BookingStatus:
    if not events:
        return BookingStatus.NO_EVENTS

    today_str = today_string(today)
    if any(event.event_date >= today_str for event in events):
        return BookingStatus.SHOOT_SCHEDULED
    if workflows and all(is_workflow_fully_delivered(workflow) for workflow in workflows):
        return BookingStatus.DELIVERED
    if any(has_started(workflow) for workflow in workflows):
        return BookingStatus.POST_PRODUCTION
    return BookingStatus.IN_PROGRESS


def medium_progress(workflow: Workflow | None) -> dict[str, MediumProgress]:
    """Completed and applicable step counts per medium."""

    if workflow is None:
        return {medium: MediumProgress() for medium in MEDIA_STEPS}
    progress: dict[str, MediumProgress] = {}
    for medium in MEDIA_STEPS:
        states = [state for state in workflow.steps(medium).values() if state is not StepState.NOT_APPLICABLE]
        progress[medium] = MediumProgress(
            completed=sum(1 for state in states if state is StepState.COMPLETED),
            total=len(states),
        )
    return progress


def overall_progress(workflows: Iterable[Workflow]) -> int:
    """Percentage of applicable steps completed across ``workflows``."""

    completed = 0
    total = 0
    for workflow in workflows:
        for state in workflow.all_states():
            if state is StepState.NOT_APPLICABLE:
                continue
            total += 1
            if state is StepState.COMPLETED:
                completed += 1
    if total == 0:
        return 0
    ratio = Decimal(100 * completed) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def progress_tier(percentage: int) -> ProgressTier:
    if percentage <= 0:
        return ProgressTier.NEUTRAL
    if percentage < 30:
        return ProgressTier.STARTED
    if percentage < 60:
        return ProgressTier.UNDERWAY
    if percentage < 100:
        return ProgressTier.ADVANCED
    return ProgressTier.COMPLETE


def next_event(events: Sequence[Event], *, today: date | str | None = None) -> Event | None:
    """Earliest event from today onwards, falling back to the last event given."""

    if not events:
        return None
    today_str = today_string(today)
    upcoming = sorted((event for event in events if event.event_date >= today_str), key=lambda event: event.event_date)
    return upcoming[0] if upcoming else events[-1]
