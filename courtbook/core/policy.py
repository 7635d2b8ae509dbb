from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from .intervals import contains, normalize_time
from .records import BookingSlot, PolicyViolation, VenueAdminConfig

PLATFORM_TIME_ZONE = "America/Los_Angeles"

MIN_ADVANCE_DAYS = "min_advance_days"
MIN_LEAD_TIME = "min_lead_time"
SAME_DAY_CUTOFF = "same_day_cutoff"
BLACKOUT = "blackout"
HOLIDAY = "holiday"
OPERATING_HOURS = "operating_hours"


def day_of_week(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return day.isoweekday() % 7


def _local_now(now: datetime, time_zone: str) -> datetime:
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(time_zone)).replace(tzinfo=None)


def _slot_start(slot: BookingSlot, time_zone: str, aware: bool) -> datetime:
    start = time.fromisoformat(normalize_time(slot.start_time))
    value = datetime.combine(date.fromisoformat(slot.date), start)
    if aware:
        return value.replace(tzinfo=ZoneInfo(time_zone)).astimezone(timezone.utc)
    return value


def _hours_until(slot: BookingSlot, now: datetime, time_zone: str) -> float:
    aware = now.tzinfo is not None
    start = _slot_start(slot, time_zone, aware)
    reference = now.astimezone(timezone.utc) if aware else now
    return (start - reference).total_seconds() / 3600


def get_booking_policy_violation(
    slot: BookingSlot,
    config: VenueAdminConfig,
    now: datetime,
    time_zone: str = PLATFORM_TIME_ZONE,
) -> PolicyViolation | None:
    """Return the first venue rule the slot breaks, or None.

    Rules run in a fixed order: advance days, lead time, same-day cutoff,
    blackout, holiday, operating hours. A timezone-aware ``now`` is read in
    ``time_zone``; a naive one is taken as venue wall-clock time.
    """
    local_now = _local_now(now, time_zone)
    today = local_now.date()
    booking_day = date.fromisoformat(slot.date)

    advance_days = max(0, int(config.min_advance_booking_days or 0))
    if advance_days > 0 and booking_day < today + timedelta(days=advance_days):
        return PolicyViolation(
            code=MIN_ADVANCE_DAYS,
            message=(
                "Booking does not meet minimum advance booking period "
                f"of {advance_days} day(s)"
            ),
        )

    lead_hours = max(0, config.min_advance_lead_time_hours or 0)
    if lead_hours > 0 and _hours_until(slot, now, time_zone) < lead_hours:
        return PolicyViolation(
            code=MIN_LEAD_TIME,
            message=f"Booking does not meet minimum lead time of {lead_hours} hour(s)",
        )

    cutoff = config.same_day_cutoff_time
    if cutoff and booking_day == today:
        if local_now.strftime("%H:%M:%S") >= normalize_time(cutoff):
            return PolicyViolation(
                code=SAME_DAY_CUTOFF,
                message=f"Same-day bookings close at {cutoff[:5]}",
            )

    if slot.date in config.blackout_dates:
        return PolicyViolation(
            code=BLACKOUT, message="Venue is unavailable on this blackout date"
        )

    if slot.date in config.holiday_dates:
        return PolicyViolation(code=HOLIDAY, message="Venue is unavailable on this holiday")

    if config.operating_hours:
        weekday = day_of_week(booking_day)
        fits = any(
            window.day_of_week == weekday
            and contains(window.start_time, window.end_time, slot.start_time, slot.end_time)
            for window in config.operating_hours
        )
        if not fits:
            return PolicyViolation(
                code=OPERATING_HOURS,
                message="Requested time is outside the venue's operating hours",
            )

    return None


def is_slot_allowed_by_venue_config(
    slot: BookingSlot,
    config: VenueAdminConfig,
    now: datetime,
    time_zone: str = PLATFORM_TIME_ZONE,
) -> bool:
    return get_booking_policy_violation(slot, config, now, time_zone) is None
