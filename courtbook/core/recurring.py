import calendar
from dataclasses import dataclass
from datetime import date, timedelta

RECURRING_TYPES = {"none", "weekly", "monthly"}
RECURRING_WEEKLY_MAX_MONTHS = 3
RECURRING_MONTHLY_MAX_MONTHS = 6


@dataclass(frozen=True)
class RecurringInstance:
    date: str
    start_time: str
    end_time: str
    total_amount: float
    insurance_required: bool
    insurance_approved: bool
    status: str = "pending"


def add_months(day: date, months: int, anchor_day: int | None = None) -> date:
    """Shift by calendar months, clamping the day to the target month's length."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    wanted = anchor_day or day.day
    return date(year, month, min(wanted, calendar.monthrange(year, month)[1]))


def default_end_date(
    start: date,
    recurring_type: str,
    weekly_max_months: int = RECURRING_WEEKLY_MAX_MONTHS,
    monthly_max_months: int = RECURRING_MONTHLY_MAX_MONTHS,
) -> date:
    if recurring_type == "weekly":
        return add_months(start, weekly_max_months)
    if recurring_type == "monthly":
        return add_months(start, monthly_max_months)
    return start


def recurring_dates(
    start: date,
    recurring_type: str,
    end: date | None = None,
    weekly_max_months: int = RECURRING_WEEKLY_MAX_MONTHS,
    monthly_max_months: int = RECURRING_MONTHLY_MAX_MONTHS,
) -> list[date]:
    if recurring_type not in RECURRING_TYPES:
        raise ValueError(f"Unknown recurring type: {recurring_type}")
    if recurring_type == "none":
        return []

    last = end or default_end_date(start, recurring_type, weekly_max_months, monthly_max_months)
    dates: list[date] = []
    if recurring_type == "weekly":
        current = start
        while current <= last:
            dates.append(current)
            current += timedelta(days=7)
        return dates

    step = 0
    current = start
    while current <= last:
        dates.append(current)
        step += 1
        current = add_months(start, step, anchor_day=start.day)
    return dates


def recurring_instances(
    parent_date: str,
    start_time: str,
    end_time: str,
    recurring_type: str,
    total_amount: float,
    insurance_required: bool = False,
    insurance_approved: bool = True,
    end_date: str | None = None,
    **horizon,
) -> list[RecurringInstance]:
    """Instances of a repeating booking, excluding the parent's own date."""
    start = date.fromisoformat(parent_date)
    end = date.fromisoformat(end_date) if end_date else None
    return [
        RecurringInstance(
            date=day.isoformat(),
            start_time=start_time,
            end_time=end_time,
            total_amount=total_amount,
            insurance_required=insurance_required,
            insurance_approved=insurance_approved,
        )
        for day in recurring_dates(start, recurring_type, end, **horizon)
        if day != start
    ]
