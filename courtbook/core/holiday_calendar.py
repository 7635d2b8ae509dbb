from typing import Iterable

import holidays


def platform_holiday_dates(
    years: Iterable[int], country: str = "US", subdiv: str | None = None
) -> list[str]:
    """Public holidays for the platform's country as sorted YYYY-MM-DD strings."""
    calendar = holidays.country_holidays(country, subdiv=subdiv or None, years=list(years))
    return sorted(day.isoformat() for day in calendar.keys())


def merge_holiday_dates(existing: Iterable[str], extra: Iterable[str]) -> list[str]:
    return sorted(set(existing) | set(extra))
