from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from .intervals import duration_hours, normalize_time

BOOKING_STATUSES = {"pending", "confirmed", "cancelled", "completed"}
BOOKING_STATUS_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "cancelled": set(),
    "completed": set(),
}

CANCELLATION_NOTICE_HOURS = 48
MAX_ADVANCE_BOOKING_DAYS = 180
MIN_BOOKING_DURATION_HOURS = 1
MAX_BOOKING_DURATION_HOURS = 24


class InvalidTransition(ValueError):
    pass


@dataclass(frozen=True)
class CancellationInfo:
    can_cancel: bool
    eligible_for_refund: bool
    hours_until_start: float


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in BOOKING_STATUS_TRANSITIONS.get(from_status, set())


def assert_transition(from_status: str, to_status: str) -> None:
    if to_status not in BOOKING_STATUSES:
        raise InvalidTransition(f"Invalid booking status: {to_status}")
    if not can_transition(from_status, to_status):
        raise InvalidTransition(f"Cannot change booking status from {from_status} to {to_status}")


def booking_start(day: str, start_time: str) -> datetime:
    return datetime.combine(
        date.fromisoformat(day), time.fromisoformat(normalize_time(start_time))
    )


def cancellation_info(
    day: str,
    start_time: str,
    now: datetime,
    notice_hours: int = CANCELLATION_NOTICE_HOURS,
) -> CancellationInfo:
    """Renters may cancel until the booking starts; refunds need ``notice_hours``."""
    start = booking_start(day, start_time)
    hours_left = (start - now).total_seconds() / 3600
    return CancellationInfo(
        can_cancel=hours_left > 0,
        eligible_for_refund=now < start - timedelta(hours=notice_hours),
        hours_until_start=round(hours_left, 2),
    )


def validate_booking_duration(start_time: str, end_time: str) -> float:
    hours = duration_hours(start_time, end_time)
    if hours <= 0:
        raise ValueError("End time must be after start time")
    if hours < MIN_BOOKING_DURATION_HOURS:
        raise ValueError(f"Bookings must last at least {MIN_BOOKING_DURATION_HOURS} hour(s)")
    if hours > MAX_BOOKING_DURATION_HOURS:
        raise ValueError(f"Bookings cannot exceed {MAX_BOOKING_DURATION_HOURS} hours")
    return hours


def is_within_advance_window(
    day: str, today: date, max_days: int = MAX_ADVANCE_BOOKING_DAYS
) -> bool:
    booking_day = date.fromisoformat(day)
    return today <= booking_day <= today + timedelta(days=max_days)
