from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, validator

from .core.intervals import normalize_time

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}(:\d{2})?$"

BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]
RecurringType = Literal["none", "weekly", "monthly"]


def _end_after_start(value: str, values: dict) -> str:
    start_time = values.get("start_time")
    if start_time and value <= start_time:
        raise ValueError("End time must be after start time")
    return value


class TimeRangeIn(BaseModel):
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)

    @validator("start_time", "end_time")
    @classmethod
    def normalize_clock(cls, value: str) -> str:
        return normalize_time(value)

    @validator("end_time")
    @classmethod
    def validate_end_after_start(cls, value: str, values: dict) -> str:
        return _end_after_start(value, values)


class ConflictCheckRequest(TimeRangeIn):
    venue_id: str = Field(min_length=1, max_length=36)
    date: str = Field(pattern=DATE_PATTERN)
    exclude_booking_id: str | None = Field(default=None, max_length=36)


class BookingCreate(TimeRangeIn):
    venue_id: str = Field(min_length=1, max_length=36)
    date: str = Field(pattern=DATE_PATTERN)
    renter_id: str | None = Field(default=None, max_length=64)
    recurring_type: RecurringType = "none"
    recurring_end_date: str | None = Field(default=None, pattern=DATE_PATTERN)
    notes: str | None = Field(default=None, max_length=2000)


class BookingOut(BaseModel):
    id: str
    venue_id: str
    renter_id: str | None = None
    date: str
    start_time: str
    end_time: str
    status: str
    total_amount: float
    insurance_required: bool
    insurance_approved: bool
    recurring_type: str
    recurring_end_date: str | None = None
    notes: str | None = None
    recurring_instances: int = 0
    requires_immediate_payment: bool = False
    awaiting_owner_approval: bool = False
    awaiting_insurance_approval: bool = False


class BookingCancelOut(BaseModel):
    booking: BookingOut
    refund_eligible: bool
    hours_until_start: float


class VenueCreate(BaseModel):
    name: str = Field(min_length=2, max_length=160)
    hourly_rate: float = Field(gt=0)
    instant_booking: bool = False
    insurance_required: bool = False
    amenities: list[str] = []


class VenueOut(BaseModel):
    id: str
    name: str
    hourly_rate: float
    instant_booking: bool
    insurance_required: bool
    amenities: list[str]
    is_active: bool


class AvailabilityCreate(TimeRangeIn):
    date: str = Field(pattern=DATE_PATTERN)
    is_available: bool = True


class AvailabilityOut(BaseModel):
    id: str
    venue_id: str
    date: str
    start_time: str
    end_time: str
    is_available: bool


class OperatingHourWindowIn(TimeRangeIn):
    day_of_week: int = Field(ge=0, le=6)


class OperatingHourWindowOut(BaseModel):
    day_of_week: int
    start_time: str
    end_time: str


class VenueAdminConfigUpdate(BaseModel):
    drop_in_enabled: bool | None = None
    drop_in_price: float | None = Field(default=None, gt=0)
    min_advance_booking_days: int | None = Field(default=None, ge=0)
    min_advance_lead_time_hours: int | None = Field(default=None, ge=0)
    same_day_cutoff_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    operating_hours: list[OperatingHourWindowIn] | None = None
    blackout_dates: list[str] | None = None
    holiday_dates: list[str] | None = None
    insurance_requires_manual_approval: bool | None = None
    insurance_document_types: list[str] | None = None
    policy_cancel: str | None = None
    policy_refund: str | None = None
    policy_reschedule: str | None = None
    policy_no_show: str | None = None
    policy_operating_hours_notes: str | None = None
    review_cadence_days: int | None = Field(default=None, ge=1, le=365)
    hourly_rate: float | None = Field(default=None, gt=0)
    instant_booking: bool | None = None
    insurance_required: bool | None = None
    amenities: list[str] | None = None
    is_active: bool | None = None
    mark_reviewed_now: bool = False
    updated_by: str | None = Field(default=None, max_length=120)

    @validator("same_day_cutoff_time")
    @classmethod
    def normalize_cutoff(cls, value: str | None) -> str | None:
        return normalize_time(value) if value else value

    @validator("blackout_dates", "holiday_dates")
    @classmethod
    def validate_dates(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        for item in value:
            if not isinstance(item, str) or len(item) != 10 or item[4] != "-" or item[7] != "-":
                raise ValueError("Date must be YYYY-MM-DD")
        return value

    @validator("insurance_document_types")
    @classmethod
    def validate_document_types(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        if any(not item.strip() for item in value):
            raise ValueError("insurance document types cannot be blank")
        return value


class VenueAdminConfigOut(BaseModel):
    venue_id: str
    drop_in_enabled: bool
    drop_in_price: float | None = None
    min_advance_booking_days: int
    min_advance_lead_time_hours: float
    same_day_cutoff_time: str | None = None
    operating_hours: list[OperatingHourWindowOut]
    blackout_dates: list[str]
    holiday_dates: list[str]
    insurance_requires_manual_approval: bool
    insurance_document_types: list[str]
    policy_cancel: str | None = None
    policy_refund: str | None = None
    policy_reschedule: str | None = None
    policy_no_show: str | None = None
    policy_operating_hours_notes: str | None = None
    review_cadence_days: int
    last_reviewed_at: datetime | None = None
    updated_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class HolidayPrefillRequest(BaseModel):
    years: list[int] = Field(min_items=1, max_items=5)
    country: str | None = Field(default=None, min_length=2, max_length=3)
    subdiv: str | None = Field(default=None, max_length=8)


class VenueCompletenessOut(BaseModel):
    venue_id: str
    score: int
    missing_fields: list[str]
    review_due: bool
    next_review_at: datetime | None = None
