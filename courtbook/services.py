from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from .config import settings
from .core.completeness import calculate_venue_config_completeness
from .core.conflicts import check_booking_conflicts
from .core.holiday_calendar import merge_holiday_dates, platform_holiday_dates
from .core.intervals import duration_hours, normalize_time
from .core.lifecycle import assert_transition, cancellation_info, validate_booking_duration
from .core.policy import get_booking_policy_violation
from .core.records import (
    AvailabilityBlockRecord,
    BookingRecord,
    BookingSlot,
    ConflictResult,
    PolicyViolation,
    RecurringBookingRecord,
    VenueAdminConfig,
    VenueConfigCompleteness,
    VenueRecord,
)
from .core.recurring import recurring_instances
from .core.venue_config import normalize_venue_admin_config, venue_admin_config_to_dict
from .models import (
    Availability,
    Booking,
    RecurringBooking,
    Venue,
    VenueAdminConfigRow,
    utc_now_naive,
)

log = structlog.get_logger("courtbook.services")

_CONFIG_COLUMNS = (
    "drop_in_enabled",
    "drop_in_price",
    "min_advance_booking_days",
    "min_advance_lead_time_hours",
    "same_day_cutoff_time",
    "operating_hours",
    "blackout_dates",
    "holiday_dates",
    "insurance_requires_manual_approval",
    "insurance_document_types",
    "policy_cancel",
    "policy_refund",
    "policy_reschedule",
    "policy_no_show",
    "policy_operating_hours_notes",
    "review_cadence_days",
    "last_reviewed_at",
    "updated_by",
)


class BookingConflict(ValueError):
    def __init__(self, result: ConflictResult):
        super().__init__(result.message or "Booking conflict detected")
        self.result = result


class PolicyViolationError(ValueError):
    def __init__(self, violation: PolicyViolation):
        super().__init__(violation.message)
        self.violation = violation


def platform_now() -> datetime:
    return datetime.now(ZoneInfo(settings.PLATFORM_TIME_ZONE))


def _venue_wall_clock(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(settings.PLATFORM_TIME_ZONE)).replace(tzinfo=None)


def _booking_record(row: Booking) -> BookingRecord:
    return BookingRecord(
        id=row.id,
        venue_id=row.venue_id,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        status=row.status,
    )


def _recurring_record(row: RecurringBooking) -> RecurringBookingRecord:
    return RecurringBookingRecord(
        id=row.id,
        parent_booking_id=row.parent_booking_id,
        venue_id=row.venue_id,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        status=row.status,
    )


def _availability_record(row: Availability) -> AvailabilityBlockRecord:
    return AvailabilityBlockRecord(
        id=row.id,
        venue_id=row.venue_id,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        is_available=bool(row.is_available),
    )


def venue_record(venue: Venue) -> VenueRecord:
    return VenueRecord(
        id=venue.id,
        hourly_rate=float(venue.hourly_rate or 0),
        insurance_required=bool(venue.insurance_required),
        amenities=tuple(a for a in (venue.amenities or []) if isinstance(a, str) and a.strip()),
    )


def _config_row_to_raw(row: VenueAdminConfigRow) -> dict:
    raw = {name: getattr(row, name) for name in _CONFIG_COLUMNS}
    raw["created_at"] = row.created_at
    raw["updated_at"] = row.updated_at
    return raw


# Venues and availability


def get_venue(db: Session, venue_id: str) -> Venue | None:
    return db.get(Venue, venue_id)


def require_venue(db: Session, venue_id: str) -> Venue:
    venue = get_venue(db, venue_id)
    if venue is None:
        raise LookupError("Venue not found")
    return venue


def create_venue(
    db: Session,
    name: str,
    hourly_rate: float,
    instant_booking: bool = False,
    insurance_required: bool = False,
    amenities: list[str] | None = None,
) -> Venue:
    venue = Venue(
        name=name.strip(),
        hourly_rate=hourly_rate,
        instant_booking=instant_booking,
        insurance_required=insurance_required,
        amenities=[a.strip() for a in (amenities or []) if a.strip()],
    )
    db.add(venue)
    db.commit()
    db.refresh(venue)
    log.info("venue_created", venue_id=venue.id)
    return venue


VENUE_UPDATE_FIELDS = ("hourly_rate", "instant_booking", "insurance_required", "amenities", "is_active")


def update_venue(db: Session, venue_id: str, updates: dict) -> Venue:
    venue = require_venue(db, venue_id)
    for name in VENUE_UPDATE_FIELDS:
        if name not in updates:
            continue
        value = updates[name]
        if name == "amenities":
            value = [a.strip() for a in (value or []) if a.strip()]
        elif name == "hourly_rate":
            if value is None or float(value) <= 0:
                raise ValueError("hourly_rate must be positive")
        elif value is None:
            continue
        setattr(venue, name, value)
    db.commit()
    db.refresh(venue)
    log.info("venue_updated", venue_id=venue.id, fields=sorted(n for n in updates if n in VENUE_UPDATE_FIELDS))
    return venue


def add_availability_block(
    db: Session,
    venue_id: str,
    day: str,
    start_time: str,
    end_time: str,
    is_available: bool = True,
) -> Availability:
    require_venue(db, venue_id)
    block = Availability(
        venue_id=venue_id,
        date=day,
        start_time=normalize_time(start_time),
        end_time=normalize_time(end_time),
        is_available=is_available,
    )
    db.add(block)
    db.commit()
    db.refresh(block)
    return block


def list_availability(db: Session, venue_id: str, day: str) -> list[Availability]:
    stmt = (
        select(Availability)
        .where(Availability.venue_id == venue_id, Availability.date == day)
        .order_by(Availability.start_time.asc())
    )
    return db.execute(stmt).scalars().all()


# Venue admin config


def _config_row(db: Session, venue_id: str) -> VenueAdminConfigRow | None:
    return db.get(VenueAdminConfigRow, venue_id)


def load_venue_admin_config(db: Session, venue_id: str) -> VenueAdminConfig:
    row = _config_row(db, venue_id)
    raw = _config_row_to_raw(row) if row else None
    return normalize_venue_admin_config(
        venue_id, raw, default_review_cadence_days=settings.DEFAULT_REVIEW_CADENCE_DAYS
    )


def _write_config_row(
    db: Session, venue_id: str, config: VenueAdminConfig
) -> VenueAdminConfigRow:
    row = _config_row(db, venue_id)
    if row is None:
        row = VenueAdminConfigRow(venue_id=venue_id)
        db.add(row)
    payload = venue_admin_config_to_dict(config)
    for name in _CONFIG_COLUMNS:
        setattr(row, name, payload[name])
    row.updated_at = utc_now_naive()
    db.commit()
    db.refresh(row)
    return row


def upsert_venue_admin_config(
    db: Session,
    venue_id: str,
    updates: dict,
    mark_reviewed_now: bool = False,
    actor: str | None = None,
) -> VenueAdminConfig:
    require_venue(db, venue_id)
    current = venue_admin_config_to_dict(load_venue_admin_config(db, venue_id))
    merged = {**current, **updates}
    if actor:
        merged["updated_by"] = actor
    if mark_reviewed_now:
        merged["last_reviewed_at"] = utc_now_naive()

    config = normalize_venue_admin_config(
        venue_id, merged, default_review_cadence_days=settings.DEFAULT_REVIEW_CADENCE_DAYS
    )
    if config.drop_in_enabled and config.drop_in_price is None:
        raise ValueError("drop_in_price is required when drop_in_enabled is true")
    _write_config_row(db, venue_id, config)
    log.info(
        "venue_config_upserted",
        venue_id=venue_id,
        fields=sorted(updates),
        reviewed=mark_reviewed_now,
    )
    return load_venue_admin_config(db, venue_id)


def mark_venue_config_reviewed(
    db: Session, venue_id: str, actor: str | None = None
) -> VenueAdminConfig:
    config = upsert_venue_admin_config(db, venue_id, {}, mark_reviewed_now=True, actor=actor)
    log.info("venue_config_reviewed", venue_id=venue_id, actor=actor)
    return config


def prefill_holiday_dates(
    db: Session,
    venue_id: str,
    years: list[int],
    country: str | None = None,
    subdiv: str | None = None,
) -> VenueAdminConfig:
    current = load_venue_admin_config(db, venue_id)
    extra = platform_holiday_dates(
        years,
        country=(country or settings.HOLIDAY_COUNTRY),
        subdiv=(subdiv if subdiv is not None else settings.HOLIDAY_SUBDIV),
    )
    merged = merge_holiday_dates(current.holiday_dates, extra)
    return upsert_venue_admin_config(db, venue_id, {"holiday_dates": merged})


def get_venue_completeness(
    db: Session, venue_id: str, now: datetime | None = None
) -> VenueConfigCompleteness:
    venue = require_venue(db, venue_id)
    config = load_venue_admin_config(db, venue_id)
    return calculate_venue_config_completeness(
        venue_record(venue), config, now or datetime.now(timezone.utc)
    )


# Bookings


def check_conflicts(
    db: Session,
    venue_id: str,
    day: str,
    start_time: str,
    end_time: str,
    exclude_booking_id: str | None = None,
) -> ConflictResult:
    slot = BookingSlot(
        venue_id=venue_id,
        date=day,
        start_time=normalize_time(start_time),
        end_time=normalize_time(end_time),
    )
    bookings = db.execute(
        select(Booking).where(Booking.venue_id == venue_id, Booking.date == day)
    ).scalars()
    recurring = db.execute(
        select(RecurringBooking).where(
            RecurringBooking.venue_id == venue_id, RecurringBooking.date == day
        )
    ).scalars()
    blocks = db.execute(
        select(Availability).where(Availability.venue_id == venue_id, Availability.date == day)
    ).scalars()

    result = check_booking_conflicts(
        slot,
        [_booking_record(b) for b in bookings],
        [_recurring_record(r) for r in recurring],
        [_availability_record(a) for a in blocks],
        exclude_booking_id=exclude_booking_id,
    )
    if result.has_conflict:
        log.info(
            "booking_conflict_detected",
            venue_id=venue_id,
            date=day,
            conflict_type=result.conflict_type,
            conflicting_booking_id=result.conflicting_booking_id,
        )
    return result


def create_booking(
    db: Session,
    venue_id: str,
    day: str,
    start_time: str,
    end_time: str,
    renter_id: str | None = None,
    recurring_type: str = "none",
    recurring_end_date: str | None = None,
    notes: str | None = None,
    now: datetime | None = None,
) -> tuple[Booking, int]:
    """Validate and insert a booking; returns it with the number of recurring instances."""
    venue = require_venue(db, venue_id)
    start_time = normalize_time(start_time)
    end_time = normalize_time(end_time)
    validate_booking_duration(start_time, end_time)

    slot = BookingSlot(venue_id=venue_id, date=day, start_time=start_time, end_time=end_time)
    config = load_venue_admin_config(db, venue_id)
    violation = get_booking_policy_violation(
        slot, config, now or platform_now(), time_zone=settings.PLATFORM_TIME_ZONE
    )
    if violation:
        log.info("booking_policy_violation", venue_id=venue_id, date=day, code=violation.code)
        raise PolicyViolationError(violation)

    conflict = check_conflicts(db, venue_id, day, start_time, end_time)
    if conflict.has_conflict:
        raise BookingConflict(conflict)

    insurance_required = bool(venue.insurance_required)
    total_amount = round(duration_hours(start_time, end_time) * float(venue.hourly_rate or 0), 2)
    booking = Booking(
        venue_id=venue_id,
        renter_id=renter_id,
        date=day,
        start_time=start_time,
        end_time=end_time,
        status="pending",
        total_amount=total_amount,
        insurance_required=insurance_required,
        insurance_approved=not insurance_required,
        recurring_type=recurring_type,
        recurring_end_date=recurring_end_date,
        notes=notes,
    )
    db.add(booking)
    db.flush()

    instances = recurring_instances(
        day,
        start_time,
        end_time,
        recurring_type,
        total_amount,
        insurance_required=insurance_required,
        insurance_approved=not insurance_required,
        end_date=recurring_end_date,
        weekly_max_months=settings.RECURRING_WEEKLY_MAX_MONTHS,
        monthly_max_months=settings.RECURRING_MONTHLY_MAX_MONTHS,
    )
    for instance in instances:
        db.add(
            RecurringBooking(
                parent_booking_id=booking.id,
                venue_id=venue_id,
                renter_id=renter_id,
                date=instance.date,
                start_time=instance.start_time,
                end_time=instance.end_time,
                status=instance.status,
                total_amount=instance.total_amount,
                insurance_approved=instance.insurance_approved,
            )
        )
    db.commit()
    db.refresh(booking)
    log.info(
        "booking_created",
        booking_id=booking.id,
        venue_id=venue_id,
        date=day,
        recurring_instances=len(instances),
    )
    return booking, len(instances)


def get_booking(db: Session, booking_id: str) -> Booking | None:
    return db.get(Booking, booking_id)


def count_recurring_instances(db: Session, booking_id: str) -> int:
    rows = db.execute(
        select(RecurringBooking.id).where(RecurringBooking.parent_booking_id == booking_id)
    ).all()
    return len(rows)


def _set_status(db: Session, booking: Booking, to_status: str) -> Booking:
    assert_transition(booking.status, to_status)
    booking.status = to_status
    db.commit()
    db.refresh(booking)
    return booking


def cancel_booking(db: Session, booking_id: str, now: datetime | None = None):
    booking = get_booking(db, booking_id)
    if booking is None:
        raise LookupError("Booking not found")

    info = cancellation_info(
        booking.date,
        booking.start_time,
        _venue_wall_clock(now or platform_now()),
        notice_hours=settings.CANCELLATION_NOTICE_HOURS,
    )
    if not info.can_cancel:
        raise ValueError("Cannot cancel a booking that has already started")

    _set_status(db, booking, "cancelled")
    log.info(
        "booking_cancelled",
        booking_id=booking.id,
        refund_eligible=info.eligible_for_refund,
    )
    return booking, info


def approve_booking_insurance(db: Session, booking_id: str) -> Booking:
    booking = get_booking(db, booking_id)
    if booking is None:
        raise LookupError("Booking not found")
    if booking.status != "pending":
        raise ValueError("Only pending bookings can be insurance-approved")
    if not booking.insurance_required:
        raise ValueError("Booking does not require insurance approval")
    if booking.insurance_approved:
        raise ValueError("Insurance already approved")

    booking.insurance_approved = True
    db.commit()
    db.refresh(booking)
    log.info("booking_insurance_approved", booking_id=booking.id, venue_id=booking.venue_id)
    return booking


def update_booking_status(db: Session, booking_id: str, to_status: str) -> Booking:
    booking = get_booking(db, booking_id)
    if booking is None:
        raise LookupError("Booking not found")
    from_status = booking.status
    _set_status(db, booking, to_status)
    log.info("booking_status_changed", booking_id=booking.id, from_status=from_status, to_status=to_status)
    return booking
