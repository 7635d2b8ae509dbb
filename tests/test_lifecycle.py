from datetime import date, datetime

import pytest

from courtbook.core.lifecycle import (
    InvalidTransition,
    assert_transition,
    can_transition,
    cancellation_info,
    is_within_advance_window,
    validate_booking_duration,
)


def test_status_transitions():
    assert can_transition("pending", "confirmed")
    assert can_transition("confirmed", "completed")
    assert can_transition("confirmed", "cancelled")
    assert not can_transition("confirmed", "pending")
    assert not can_transition("cancelled", "confirmed")
    with pytest.raises(InvalidTransition):
        assert_transition("completed", "cancelled")
    with pytest.raises(ValueError):
        assert_transition("pending", "archived")


def test_refund_needs_48_hours_notice():
    eligible = cancellation_info("2026-03-10", "18:00:00", datetime(2026, 3, 8, 17, 0))
    assert eligible.can_cancel is True
    assert eligible.eligible_for_refund is True
    assert eligible.hours_until_start == 49

    late = cancellation_info("2026-03-10", "18:00:00", datetime(2026, 3, 8, 19, 0))
    assert late.can_cancel is True
    assert late.eligible_for_refund is False


def test_started_booking_cannot_be_cancelled():
    info = cancellation_info("2026-03-10", "18:00", datetime(2026, 3, 10, 18, 0))
    assert info.can_cancel is False
    assert info.eligible_for_refund is False


def test_booking_duration_bounds():
    assert validate_booking_duration("18:00:00", "20:30:00") == 2.5
    with pytest.raises(ValueError):
        validate_booking_duration("18:00:00", "18:00:00")
    with pytest.raises(ValueError):
        validate_booking_duration("18:00:00", "18:30:00")


def test_advance_window():
    today = date(2026, 3, 1)
    assert is_within_advance_window("2026-03-01", today)
    assert is_within_advance_window("2026-08-28", today)
    assert not is_within_advance_window("2026-08-29", today)
    assert not is_within_advance_window("2026-02-28", today)
