from dataclasses import dataclass, field
from datetime import datetime

ACTIVE_BOOKING_STATUSES = frozenset({"pending", "confirmed"})


@dataclass(frozen=True)
class BookingSlot:
    """Candidate reservation: one venue, one day, one time range."""

    venue_id: str
    date: str
    start_time: str
    end_time: str


@dataclass(frozen=True)
class BookingRecord:
    id: str
    venue_id: str
    date: str
    start_time: str
    end_time: str
    status: str


@dataclass(frozen=True)
class RecurringBookingRecord:
    id: str
    parent_booking_id: str
    venue_id: str
    date: str
    start_time: str
    end_time: str
    status: str


@dataclass(frozen=True)
class AvailabilityBlockRecord:
    venue_id: str
    date: str
    start_time: str
    end_time: str
    is_available: bool
    id: str | None = None


@dataclass(frozen=True)
class OperatingHourWindow:
    day_of_week: int
    start_time: str
    end_time: str


@dataclass(frozen=True)
class VenueRecord:
    id: str
    hourly_rate: float | None = None
    insurance_required: bool = False
    amenities: tuple[str, ...] = ()


@dataclass(frozen=True)
class VenueAdminConfig:
    venue_id: str
    drop_in_enabled: bool = False
    drop_in_price: float | None = None
    min_advance_booking_days: int = 0
    min_advance_lead_time_hours: float = 0
    same_day_cutoff_time: str | None = None
    operating_hours: tuple[OperatingHourWindow, ...] = ()
    blackout_dates: tuple[str, ...] = ()
    holiday_dates: tuple[str, ...] = ()
    insurance_requires_manual_approval: bool = True
    insurance_document_types: tuple[str, ...] = ()
    policy_cancel: str | None = None
    policy_refund: str | None = None
    policy_reschedule: str | None = None
    policy_no_show: str | None = None
    policy_operating_hours_notes: str | None = None
    review_cadence_days: int = 30
    last_reviewed_at: datetime | None = None
    updated_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ConflictResult:
    has_conflict: bool
    conflict_type: str | None = None
    conflicting_booking_id: str | None = None
    message: str | None = None

    def to_payload(self) -> dict:
        payload: dict = {"hasConflict": self.has_conflict}
        if self.conflict_type:
            payload["conflictType"] = self.conflict_type
        if self.conflicting_booking_id:
            payload["conflictingBookingId"] = self.conflicting_booking_id
        if self.message:
            payload["message"] = self.message
        return payload


@dataclass(frozen=True)
class PolicyViolation:
    code: str
    message: str


@dataclass(frozen=True)
class VenueConfigCompleteness:
    score: int
    missing_fields: list[str] = field(default_factory=list)
    review_due: bool = True
    next_review_at: datetime | None = None
