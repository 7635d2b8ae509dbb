from courtbook.core.conflicts import check_booking_conflicts
from courtbook.core.records import (
    AvailabilityBlockRecord,
    BookingRecord,
    BookingSlot,
    RecurringBookingRecord,
)

VENUE = "venue-v"
DAY = "2026-02-21"


def _booking(booking_id="b-1", start="18:00:00", end="19:00:00", status="confirmed", venue=VENUE, day=DAY):
    return BookingRecord(id=booking_id, venue_id=venue, date=day, start_time=start, end_time=end, status=status)


def _open_block(start="18:00:00", end="22:00:00", is_available=True, day=DAY):
    return AvailabilityBlockRecord(venue_id=VENUE, date=day, start_time=start, end_time=end, is_available=is_available)


def _slot(start, end, day=DAY):
    return BookingSlot(venue_id=VENUE, date=day, start_time=start, end_time=end)


def test_overlapping_confirmed_booking_is_reported():
    result = check_booking_conflicts(_slot("18:30:00", "19:30:00"), [_booking()], [], [_open_block()])
    assert result.has_conflict is True
    assert result.conflict_type == "time_overlap"
    assert result.conflicting_booking_id == "b-1"
    assert result.message == "Booking time conflicts with existing booking"


def test_adjacent_slot_inside_open_block_is_accepted():
    result = check_booking_conflicts(_slot("19:00:00", "20:00:00"), [_booking()], [], [_open_block()])
    assert result.has_conflict is False
    assert result.to_payload() == {"hasConflict": False}


def test_overlap_is_symmetric():
    a = _booking("a", "10:00:00", "12:00:00", "pending")
    b = _booking("b", "11:00:00", "13:00:00", "confirmed")
    blocks = [_open_block("08:00:00", "20:00:00")]

    against_a = check_booking_conflicts(_slot(b.start_time, b.end_time), [a], [], blocks)
    against_b = check_booking_conflicts(_slot(a.start_time, a.end_time), [b], [], blocks)
    assert against_a.conflicting_booking_id == "a"
    assert against_b.conflicting_booking_id == "b"


def test_cancelled_completed_and_other_venues_or_days_are_ignored():
    bookings = [
        _booking("cancelled", status="cancelled"),
        _booking("completed", status="completed"),
        _booking("other-venue", venue="venue-w"),
        _booking("other-day", day="2026-02-22"),
    ]
    result = check_booking_conflicts(_slot("18:00:00", "19:00:00"), bookings, [], [_open_block()])
    assert result.has_conflict is False


def test_excluded_booking_does_not_conflict_with_itself():
    result = check_booking_conflicts(
        _slot("18:00:00", "19:00:00"), [_booking()], [], [_open_block()], exclude_booking_id="b-1"
    )
    assert result.has_conflict is False


def test_recurring_booking_conflict_is_reported_after_regular_bookings():
    recurring = RecurringBookingRecord(
        id="r-1",
        parent_booking_id="b-0",
        venue_id=VENUE,
        date=DAY,
        start_time="20:00:00",
        end_time="21:00:00",
        status="pending",
    )
    result = check_booking_conflicts(_slot("20:30:00", "21:30:00"), [_booking()], [recurring], [_open_block()])
    assert result.conflict_type == "time_overlap"
    assert result.conflicting_booking_id == "r-1"
    assert result.message == "Booking time conflicts with existing recurring booking"

    first = check_booking_conflicts(_slot("18:30:00", "20:30:00"), [_booking()], [recurring], [_open_block()])
    assert first.conflicting_booking_id == "b-1"


def test_slot_exactly_matching_block_is_accepted():
    result = check_booking_conflicts(_slot("18:00:00", "22:00:00"), [], [], [_open_block()])
    assert result.has_conflict is False


def test_slot_one_minute_past_block_is_unavailable():
    result = check_booking_conflicts(_slot("21:00:00", "22:01:00"), [], [], [_open_block()])
    assert result.has_conflict is True
    assert result.conflict_type == "availability_unavailable"
    assert result.conflicting_booking_id is None
    assert result.to_payload() == {
        "hasConflict": True,
        "conflictType": "availability_unavailable",
        "message": "Requested time slot is not available",
    }


def test_closed_blocks_and_missing_blocks_are_unavailable():
    closed = check_booking_conflicts(_slot("18:00:00", "19:00:00"), [], [], [_open_block(is_available=False)])
    missing = check_booking_conflicts(_slot("18:00:00", "19:00:00"), [], [], [])
    assert closed.conflict_type == "availability_unavailable"
    assert missing.conflict_type == "availability_unavailable"


def test_slot_spanning_two_adjacent_blocks_is_not_covered():
    blocks = [_open_block("18:00:00", "20:00:00"), _open_block("20:00:00", "22:00:00")]
    result = check_booking_conflicts(_slot("19:00:00", "21:00:00"), [], [], blocks)
    assert result.conflict_type == "availability_unavailable"
