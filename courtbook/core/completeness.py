import math
from datetime import datetime, timedelta, timezone

from .records import VenueAdminConfig, VenueConfigCompleteness, VenueRecord


def _utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _checklist(venue: VenueRecord, config: VenueAdminConfig) -> list[tuple[str, bool]]:
    return [
        ("hourly_rate", (venue.hourly_rate or 0) > 0),
        (
            "drop_in_price",
            not config.drop_in_enabled
            or (config.drop_in_price is not None and config.drop_in_price > 0),
        ),
        ("operating_hours", len(config.operating_hours) > 0),
        ("lead_time", config.min_advance_lead_time_hours >= 0),
        ("same_day_cutoff", bool(config.same_day_cutoff_time)),
        ("amenities", len(venue.amenities) > 0),
        ("review_cadence", config.review_cadence_days > 0),
        (
            "insurance_document_types",
            not venue.insurance_required or len(config.insurance_document_types) > 0,
        ),
        ("last_reviewed_at", config.last_reviewed_at is not None),
    ]


def next_review_at(config: VenueAdminConfig) -> datetime | None:
    if config.last_reviewed_at is None:
        return None
    return _utc_naive(config.last_reviewed_at) + timedelta(days=config.review_cadence_days)


def calculate_venue_config_completeness(
    venue: VenueRecord, config: VenueAdminConfig, now: datetime
) -> VenueConfigCompleteness:
    checks = _checklist(venue, config)
    passed = sum(1 for _, ok in checks if ok)
    score = int(math.floor(100 * passed / len(checks) + 0.5))

    due_at = next_review_at(config)
    review_due = True if due_at is None else _utc_naive(now) >= due_at

    return VenueConfigCompleteness(
        score=score,
        missing_fields=[key for key, ok in checks if not ok],
        review_due=review_due,
        next_review_at=due_at,
    )
