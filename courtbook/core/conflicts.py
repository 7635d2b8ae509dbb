from typing import Iterable

from .intervals import contains, overlaps
from .records import (
    ACTIVE_BOOKING_STATUSES,
    AvailabilityBlockRecord,
    BookingRecord,
    BookingSlot,
    ConflictResult,
    RecurringBookingRecord,
)

TIME_OVERLAP = "time_overlap"
AVAILABILITY_UNAVAILABLE = "availability_unavailable"


def _is_competing(row, slot: BookingSlot) -> bool:
    return (
        row.venue_id == slot.venue_id
        and row.date == slot.date
        and row.status in ACTIVE_BOOKING_STATUSES
        and overlaps(slot.start_time, slot.end_time, row.start_time, row.end_time)
    )


def find_conflicting_bookings(
    bookings: Iterable[BookingRecord],
    slot: BookingSlot,
    exclude_booking_id: str | None = None,
) -> list[BookingRecord]:
    return [
        booking
        for booking in bookings
        if not (exclude_booking_id and booking.id == exclude_booking_id)
        and _is_competing(booking, slot)
    ]


def find_conflicting_recurring(
    recurring_bookings: Iterable[RecurringBookingRecord],
    slot: BookingSlot,
) -> list[RecurringBookingRecord]:
    return [row for row in recurring_bookings if _is_competing(row, slot)]


def is_covered_by_availability(
    blocks: Iterable[AvailabilityBlockRecord], slot: BookingSlot
) -> bool:
    """True when one open block on the venue/day fully contains the slot."""
    for block in blocks:
        if block.venue_id != slot.venue_id or block.date != slot.date:
            continue
        if not block.is_available:
            continue
        if contains(block.start_time, block.end_time, slot.start_time, slot.end_time):
            return True
    return False


def check_booking_conflicts(
    slot: BookingSlot,
    bookings: Iterable[BookingRecord],
    recurring_bookings: Iterable[RecurringBookingRecord],
    availability_blocks: Iterable[AvailabilityBlockRecord],
    exclude_booking_id: str | None = None,
) -> ConflictResult:
    conflicting = find_conflicting_bookings(bookings, slot, exclude_booking_id)
    if conflicting:
        return ConflictResult(
            has_conflict=True,
            conflict_type=TIME_OVERLAP,
            conflicting_booking_id=conflicting[0].id,
            message="Booking time conflicts with existing booking",
        )

    conflicting_recurring = find_conflicting_recurring(recurring_bookings, slot)
    if conflicting_recurring:
        return ConflictResult(
            has_conflict=True,
            conflict_type=TIME_OVERLAP,
            conflicting_booking_id=conflicting_recurring[0].id,
            message="Booking time conflicts with existing recurring booking",
        )

    if not is_covered_by_availability(availability_blocks, slot):
        return ConflictResult(
            has_conflict=True,
            conflict_type=AVAILABILITY_UNAVAILABLE,
            message="Requested time slot is not available",
        )

    return ConflictResult(has_conflict=False)
