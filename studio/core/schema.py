from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from studio.core.dates import normalize_date
from studio.core.money import to_amount

Amount = Annotated[Decimal, BeforeValidator(to_amount)]
CalendarDate = Annotated[str, BeforeValidator(normalize_date)]


class StepState(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    NOT_APPLICABLE = "not_applicable"


MEDIA_STEPS: dict[str, tuple[str, ...]] = {
    "still": (
        "rawDataSent",
        "clientSelectionReceived",
        "sentToAlbumEditor",
        "albumPreviewSent",
        "clientApproved",
        "revisionRequested",
        "sentForPrinting",
        "albumFinalized",
        "deliveredToClient",
    ),
    "reel": ("reelSentToEditor", "reelReceivedFromEditor", "reelSentToClient", "reelDelivered"),
    "video": ("videoSentToEditor", "videoReceivedFromEditor", "videoSentToClient", "videoDelivered"),
    "portrait": ("portraitEdited", "portraitDelivered"),
}

TERMINAL_STEPS: dict[str, str] = {medium: steps[-1] for medium, steps in MEDIA_STEPS.items()}

ROLE_REQUIREMENT_FIELDS: dict[str, str] = {
    "photographers_required": "photographer",
    "videographers_required": "videographer",
    "drone_operators_required": "drone_operator",
    "editors_required": "editor",
}


def _coerce_step(value: Any) -> StepState:
    if isinstance(value, StepState):
        return value
    if isinstance(value, str):
        return StepState(value)
    if isinstance(value, bool):
        return StepState.COMPLETED if value else StepState.PENDING
    if isinstance(value, Mapping):
        # legacy flag bags: marking a step not applicable clears completion
        if value.get("notApplicable") or value.get("not_applicable"):
            return StepState.NOT_APPLICABLE
        if value.get("completed"):
            return StepState.COMPLETED
        return StepState.PENDING
    raise ValueError(f"unsupported workflow step value: {value!r}")


# ----------------------------------------------------------------------
# snapshot entities
# ----------------------------------------------------------------------
class Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Client(Record):
    id: str
    name: str


class Booking(Record):
    id: str
    client_id: str | None = None
    booking_name: str | None = None
    package_amount: Amount = Decimal("0")
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def display_name(self) -> str:
        if self.booking_name and self.booking_name.strip():
            return self.booking_name
        return f"Booking {self.id[:8]}"


class Event(Record):
    id: str
    booking_id: str
    event_name: str = ""
    event_date: CalendarDate
    venue: str = ""
    time_slot: Literal["morning", "afternoon", "evening", "fullDay"] = "fullDay"
    required_roles: dict[str, int] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_role_requirements(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        legacy = {field: data[field] for field in ROLE_REQUIREMENT_FIELDS if data.get(field) is not None}
        if not legacy:
            return data
        merged = dict(data)
        roles = dict(merged.get("required_roles") or {})
        for field, count in legacy.items():
            roles.setdefault(ROLE_REQUIREMENT_FIELDS[field], int(count))
            merged.pop(field, None)
        merged["required_roles"] = roles
        return merged


class Staff(Record):
    id: str
    name: str
    role: str = ""
    status: Literal["active", "inactive"] = "active"


class StaffAssignment(Record):
    id: str
    event_id: str
    staff_id: str
    role: str = ""
    data_received: bool = False
    data_received_at: str | None = None
    data_received_by: str | None = None


class Workflow(Record):
    """Production checklist of one event, one fixed step set per medium.

    Only steps that have been recorded are kept; a null or missing step is
    not tracked yet and takes no part in progress or delivery checks.
    """

    id: str | None = None
    event_id: str | None = None
    booking_id: str | None = None
    still: dict[str, StepState] = Field(default_factory=dict, alias="still_workflow", validate_default=True)
    reel: dict[str, StepState] = Field(default_factory=dict, alias="reel_workflow", validate_default=True)
    video: dict[str, StepState] = Field(default_factory=dict, alias="video_workflow", validate_default=True)
    portrait: dict[str, StepState] = Field(default_factory=dict, alias="portrait_workflow", validate_default=True)

    @field_validator("still", "reel", "video", "portrait", mode="before")
    @classmethod
    def _fill_steps(cls, value: Any, info: ValidationInfo) -> dict[str, StepState]:
        medium = info.field_name
        known = MEDIA_STEPS[medium]
        steps = value or {}
        if not isinstance(steps, Mapping):
            raise ValueError(f"{medium} workflow must be a mapping of step names")
        unknown = sorted(set(steps) - set(known))
        if unknown:
            raise ValueError(f"unknown {medium} steps: {', '.join(unknown)}")
        return {name: _coerce_step(steps[name]) for name in known if steps.get(name) is not None}

    def steps(self, medium: str) -> dict[str, StepState]:
        return getattr(self, medium)

    def all_states(self) -> list[StepState]:
        return [state for medium in MEDIA_STEPS for state in self.steps(medium).values()]


class ClientPaymentRecord(Record):
    id: str
    client_id: str | None = None
    booking_id: str
    amount: Amount
    payment_status: Literal["agreed", "received"]
    payment_date: CalendarDate
    payment_method: str | None = None
    remarks: str | None = None
    created_at: str | None = None


class StaffPaymentRecord(Record):
    id: str
    staff_id: str
    event_id: str | None = None
    type: Literal["agreed", "made"]
    amount: Amount
    payment_date: CalendarDate
    payment_method: str | None = None
    remarks: str | None = None
    created_at: str | None = None


class Expense(Record):
    id: str
    date: CalendarDate
    amount: Amount
    category: str = "general"
    description: str | None = None
    booking_id: str | None = None


class StudioSnapshot(BaseModel):
    """Full read-only view of the record store handed to the engines."""

    model_config = ConfigDict(frozen=True)

    clients: list[Client] = Field(default_factory=list)
    bookings: list[Booking] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)
    staff: list[Staff] = Field(default_factory=list)
    assignments: list[StaffAssignment] = Field(default_factory=list)
    workflows: list[Workflow] = Field(default_factory=list)
    client_payments: list[ClientPaymentRecord] = Field(default_factory=list)
    staff_payments: list[StaffPaymentRecord] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)


# ----------------------------------------------------------------------
# view models
# ----------------------------------------------------------------------
class BookingStatus(str, Enum):
    NO_EVENTS = "No Events"
    SHOOT_SCHEDULED = "Shoot Scheduled"
    IN_PROGRESS = "In Progress"
    POST_PRODUCTION = "Post-Production"
    DELIVERED = "Delivered"


class ProgressTier(str, Enum):
    NEUTRAL = "neutral"
    STARTED = "started"
    UNDERWAY = "underway"
    ADVANCED = "advanced"
    COMPLETE = "complete"


class Severity(str, Enum):
    NEUTRAL = "neutral"
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


class LedgerSummary(BaseModel):
    id: str
    name: str
    total_agreed: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_due: Decimal = Decimal("0")


class EventAmount(BaseModel):
    event_id: str
    event_name: str
    event_date: str
    booking_id: str
    amount: Decimal = Decimal("0")


class BookingLedgerRow(BaseModel):
    booking_id: str
    booking_name: str
    event_count: int = 0
    first_event_date: str | None = None
    last_event_date: str | None = None
    last_event_passed: bool = False
    agreed: Decimal = Decimal("0")
    received: Decimal = Decimal("0")
    due: Decimal = Decimal("0")


class ClientSummary(BaseModel):
    id: str
    name: str
    package_amount: Decimal = Decimal("0")
    total_agreed: Decimal = Decimal("0")
    total_received: Decimal = Decimal("0")
    outstanding: Decimal = Decimal("0")
    first_event_date: str | None = None
    last_event_date: str | None = None
    last_event_passed: bool = False


class ExpenseSummary(BaseModel):
    total: Decimal = Decimal("0")
    by_category: dict[str, Decimal] = Field(default_factory=dict)


class FinanceSummary(BaseModel):
    start: str | None = None
    end: str | None = None
    booking_count: int = 0
    agreed: Decimal = Decimal("0")
    received: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    outstanding: Decimal = Decimal("0")
    net: Decimal = Decimal("0")


class OverdueBooking(BaseModel):
    booking_id: str
    booking_name: str
    client_name: str
    agreed: Decimal
    received: Decimal
    due: Decimal
    latest_event_date: str


class MediumProgress(BaseModel):
    completed: int = 0
    total: int = 0


class PaymentStatus(BaseModel):
    package_amount: Decimal
    received: Decimal
    outstanding: Decimal
    message: str
    display: str
    severity: Severity


class Conflict(BaseModel):
    staff_id: str
    date: str
    event_ids: list[str]
    assignment_ids: list[str]


class Shortage(BaseModel):
    event_id: str
    event_date: str
    required: dict[str, int]
    assigned: dict[str, int]
    missing: dict[str, int]


class ScheduleReport(BaseModel):
    conflicts: list[Conflict] = Field(default_factory=list)
    shortages: list[Shortage] = Field(default_factory=list)


class BookingOverview(BaseModel):
    booking_id: str
    name: str
    status: BookingStatus
    progress: int
    progress_tier: ProgressTier
    payment: PaymentStatus
    event_count: int
    next_event_date: str | None = None
