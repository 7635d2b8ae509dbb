import re

_TIME_HM = re.compile(r"^\d{2}:\d{2}$")
_TIME_HMS = re.compile(r"^\d{2}:\d{2}:\d{2}$")


def is_hms(value: str | None) -> bool:
    return isinstance(value, str) and _TIME_HMS.match(value) is not None


def normalize_time(value):
    """HH:MM -> HH:MM:SS. Anything else is returned untouched."""
    if not value or not isinstance(value, str):
        return value
    if _TIME_HMS.match(value):
        return value
    if _TIME_HM.match(value):
        return f"{value}:00"
    return value


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def overlaps(start1: str, end1: str, start2: str, end2: str) -> bool:
    # half-open: 09:00-10:00 and 10:00-11:00 do not overlap
    return time_to_minutes(start1) < time_to_minutes(end2) and time_to_minutes(
        end1
    ) > time_to_minutes(start2)


def contains(outer_start: str, outer_end: str, inner_start: str, inner_end: str) -> bool:
    return time_to_minutes(inner_start) >= time_to_minutes(
        outer_start
    ) and time_to_minutes(inner_end) <= time_to_minutes(outer_end)


def duration_hours(start_time: str, end_time: str) -> float:
    return (time_to_minutes(end_time) - time_to_minutes(start_time)) / 60
