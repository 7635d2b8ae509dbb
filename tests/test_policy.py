from datetime import datetime, timezone

from courtbook.core.policy import day_of_week, get_booking_policy_violation, is_slot_allowed_by_venue_config
from courtbook.core.records import BookingSlot
from courtbook.core.venue_config import normalize_venue_admin_config

# 2026-02-21 is a Saturday.
DAY = "2026-02-21"


def _slot(start="18:00:00", end="19:00:00", day=DAY):
    return BookingSlot(venue_id="v", date=day, start_time=start, end_time=end)


def _config(**raw):
    return normalize_venue_admin_config("v", raw)


def test_default_config_allows_anything():
    now = datetime(2026, 2, 21, 23, 0)
    assert get_booking_policy_violation(_slot(), _config(), now) is None
    assert is_slot_allowed_by_venue_config(_slot(), _config(), now) is True


def test_day_of_week_starts_on_sunday():
    from datetime import date

    assert day_of_week(date(2026, 2, 22)) == 0
    assert day_of_week(date(2026, 2, 21)) == 6


def test_lead_time_reported_before_blackout():
    config = _config(min_advance_lead_time_hours=24, blackout_dates=[DAY])
    violation = get_booking_policy_violation(_slot(), config, datetime(2026, 2, 21, 10, 0))
    assert violation.code == "min_lead_time"
    assert "24 hour(s)" in violation.message


def test_lead_time_boundary_is_inclusive():
    config = _config(min_advance_lead_time_hours=8)
    assert get_booking_policy_violation(_slot(), config, datetime(2026, 2, 21, 10, 0)) is None
    assert get_booking_policy_violation(_slot(), config, datetime(2026, 2, 21, 10, 1)).code == "min_lead_time"


def test_lead_time_uses_platform_time_zone_for_aware_now():
    # 20:00 UTC is 12:00 in Los Angeles (PST).
    now = datetime(2026, 2, 21, 20, 0, tzinfo=timezone.utc)
    slot = _slot("13:00:00", "14:00:00")
    assert get_booking_policy_violation(slot, _config(min_advance_lead_time_hours=1), now) is None
    assert get_booking_policy_violation(slot, _config(min_advance_lead_time_hours=2), now).code == "min_lead_time"


def test_same_day_cutoff_only_applies_today_after_cutoff():
    config = _config(same_day_cutoff_time="12:00")
    assert get_booking_policy_violation(_slot(), config, datetime(2026, 2, 21, 11, 59)) is None
    assert get_booking_policy_violation(_slot(), config, datetime(2026, 2, 21, 12, 0)).code == "same_day_cutoff"
    assert get_booking_policy_violation(_slot(day="2026-02-22"), config, datetime(2026, 2, 21, 15, 0)) is None


def test_same_day_cutoff_reads_today_in_platform_time_zone():
    # 2026-02-22 03:00 UTC is still 2026-02-21 19:00 in Los Angeles.
    now = datetime(2026, 2, 22, 3, 0, tzinfo=timezone.utc)
    violation = get_booking_policy_violation(_slot("20:00:00", "21:00:00"), _config(same_day_cutoff_time="18:00"), now)
    assert violation.code == "same_day_cutoff"


def test_blackout_before_holiday():
    now = datetime(2026, 2, 1, 9, 0)
    assert get_booking_policy_violation(_slot(), _config(blackout_dates=[DAY], holiday_dates=[DAY]), now).code == "blackout"
    assert get_booking_policy_violation(_slot(), _config(holiday_dates=[DAY]), now).code == "holiday"


def test_operating_hours_require_a_containing_window_on_that_weekday():
    config = _config(
        operating_hours=[
            {"day_of_week": 6, "start_time": "08:00", "end_time": "12:00"},
            {"day_of_week": 6, "start_time": "17:00", "end_time": "22:00"},
            {"day_of_week": 0, "start_time": "00:00", "end_time": "23:59"},
        ]
    )
    now = datetime(2026, 2, 1, 9, 0)
    assert get_booking_policy_violation(_slot("17:00:00", "22:00:00"), config, now) is None
    assert get_booking_policy_violation(_slot("09:00:00", "10:00:00"), config, now) is None
    assert get_booking_policy_violation(_slot("11:00:00", "13:00:00"), config, now).code == "operating_hours"
    assert get_booking_policy_violation(_slot("16:30:00", "18:00:00"), config, now).code == "operating_hours"


def test_operating_hours_for_other_days_only_close_this_day():
    config = _config(operating_hours=[{"day_of_week": 4, "start_time": "09:00", "end_time": "17:00"}])
    violation = get_booking_policy_violation(_slot(), config, datetime(2026, 2, 1, 9, 0))
    assert violation.code == "operating_hours"


def test_min_advance_days():
    config = _config(min_advance_booking_days=3)
    now = datetime(2026, 2, 21, 10, 0)
    assert get_booking_policy_violation(_slot(day="2026-02-23"), config, now).code == "min_advance_days"
    assert get_booking_policy_violation(_slot(day="2026-02-24"), config, now) is None


def test_zero_lead_time_does_not_reject_past_slots():
    config = _config(min_advance_lead_time_hours=0, min_advance_booking_days=0)
    now = datetime(2026, 3, 1, 9, 0)
    assert get_booking_policy_violation(_slot(day="2026-02-21"), config, now) is None
    assert get_booking_policy_violation(_slot(), _config(min_advance_lead_time_hours=1), now).code == "min_lead_time"
