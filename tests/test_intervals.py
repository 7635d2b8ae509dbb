from courtbook.core.intervals import contains, duration_hours, normalize_time, overlaps, time_to_minutes


def test_time_to_minutes_ignores_seconds():
    assert time_to_minutes("18:30") == 1110
    assert time_to_minutes("18:30:59") == 1110


def test_adjacent_ranges_do_not_overlap():
    assert overlaps("09:00:00", "10:00:00", "10:00:00", "11:00:00") is False
    assert overlaps("10:00:00", "11:00:00", "09:00:00", "10:00:00") is False


def test_partial_and_nested_ranges_overlap():
    assert overlaps("18:30:00", "19:30:00", "18:00:00", "19:00:00") is True
    assert overlaps("18:15", "18:45", "18:00", "19:00") is True
    assert overlaps("17:00", "20:00", "18:00", "19:00") is True


def test_contains_is_closed_on_both_ends():
    assert contains("18:00:00", "22:00:00", "18:00:00", "22:00:00") is True
    assert contains("18:00:00", "22:00:00", "19:00:00", "20:00:00") is True
    assert contains("18:00:00", "22:00:00", "21:00:00", "22:01:00") is False
    assert contains("18:00:00", "22:00:00", "17:59:00", "19:00:00") is False


def test_normalize_time():
    assert normalize_time("07:30") == "07:30:00"
    assert normalize_time("07:30:15") == "07:30:15"
    assert normalize_time("7:30") == "7:30"
    assert normalize_time(None) is None


def test_duration_hours():
    assert duration_hours("18:00:00", "19:30:00") == 1.5
