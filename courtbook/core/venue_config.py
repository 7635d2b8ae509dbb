import math
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timezone
from typing import Any, Mapping

from .intervals import is_hms, normalize_time
from .records import OperatingHourWindow, VenueAdminConfig

DEFAULT_REVIEW_CADENCE_DAYS = 30

_POLICY_TEXT_FIELDS = (
    "policy_cancel",
    "policy_refund",
    "policy_reschedule",
    "policy_no_show",
    "policy_operating_hours_notes",
)


def default_venue_admin_config(
    venue_id: str, review_cadence_days: int = DEFAULT_REVIEW_CADENCE_DAYS
) -> VenueAdminConfig:
    return VenueAdminConfig(
        venue_id=venue_id, review_cadence_days=max(1, int(review_cadence_days))
    )


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _as_whole(number: float) -> int | float:
    return int(number) if float(number).is_integer() else number


def _field(window: Any, name: str) -> Any:
    if isinstance(window, Mapping):
        return window.get(name)
    return getattr(window, name, None)


def normalize_operating_hour_window(window: Any) -> OperatingHourWindow | None:
    day = _to_number(_field(window, "day_of_week"))
    if day is None or not day.is_integer() or day < 0 or day > 6:
        return None

    start = normalize_time(_field(window, "start_time"))
    end = normalize_time(_field(window, "end_time"))
    if not is_hms(start) or not is_hms(end):
        return None
    if start >= end:
        return None
    return OperatingHourWindow(day_of_week=int(day), start_time=start, end_time=end)


def normalize_operating_hours(hours: Any) -> tuple[OperatingHourWindow, ...]:
    if not isinstance(hours, (list, tuple)):
        return ()
    windows = {
        normalized
        for normalized in (normalize_operating_hour_window(entry) for entry in hours)
        if normalized is not None
    }
    return tuple(sorted(windows, key=lambda w: (w.day_of_week, w.start_time, w.end_time)))


def _normalize_date_list(values: Any) -> tuple[str, ...]:
    if not isinstance(values, (list, tuple)):
        return ()
    out = []
    for value in values:
        if isinstance(value, date):
            out.append(value.isoformat())
        elif isinstance(value, str) and value.strip():
            out.append(value.strip())
    return tuple(out)


def _normalize_str_list(values: Any) -> tuple[str, ...]:
    if not isinstance(values, (list, tuple)):
        return ()
    return tuple(str(v).strip() for v in values if isinstance(v, str) and v.strip())


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone(timezone.utc).replace(tzinfo=None)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def normalize_venue_admin_config(
    venue_id: str,
    row: Mapping[str, Any] | VenueAdminConfig | None,
    default_review_cadence_days: int = DEFAULT_REVIEW_CADENCE_DAYS,
) -> VenueAdminConfig:
    """Fill defaults and repair a persisted (possibly partial) admin config.

    Invalid operating-hour windows are dropped rather than failing the read.
    Running the result through this function again returns an equal value.
    """
    defaults = default_venue_admin_config(venue_id, default_review_cadence_days)
    if not row:
        return defaults
    if is_dataclass(row):
        row = asdict(row)

    drop_in_price = _to_number(row.get("drop_in_price"))
    if drop_in_price is not None and drop_in_price <= 0:
        drop_in_price = None

    advance_days = _to_number(row.get("min_advance_booking_days")) or 0
    lead_hours = _to_number(row.get("min_advance_lead_time_hours")) or 0
    cadence = _to_number(row.get("review_cadence_days")) or defaults.review_cadence_days

    cutoff = normalize_time(row.get("same_day_cutoff_time"))
    if not isinstance(cutoff, str) or not cutoff.strip():
        cutoff = None

    return VenueAdminConfig(
        venue_id=venue_id,
        drop_in_enabled=bool(row.get("drop_in_enabled")),
        drop_in_price=drop_in_price,
        min_advance_booking_days=max(0, int(advance_days)),
        min_advance_lead_time_hours=_as_whole(max(0.0, lead_hours)),
        same_day_cutoff_time=cutoff,
        operating_hours=normalize_operating_hours(row.get("operating_hours")),
        blackout_dates=_normalize_date_list(row.get("blackout_dates")),
        holiday_dates=_normalize_date_list(row.get("holiday_dates")),
        insurance_requires_manual_approval=bool(
            row.get(
                "insurance_requires_manual_approval",
                defaults.insurance_requires_manual_approval,
            )
        ),
        insurance_document_types=_normalize_str_list(row.get("insurance_document_types")),
        review_cadence_days=max(1, int(cadence)),
        last_reviewed_at=_parse_timestamp(row.get("last_reviewed_at")),
        updated_by=_optional_text(row.get("updated_by")),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
        **{name: _optional_text(row.get(name)) for name in _POLICY_TEXT_FIELDS},
    )


def venue_admin_config_to_dict(config: VenueAdminConfig) -> dict:
    payload = asdict(config)
    payload["operating_hours"] = [asdict(w) for w in config.operating_hours]
    for name in ("blackout_dates", "holiday_dates", "insurance_document_types"):
        payload[name] = list(payload[name])
    return payload
