from datetime import datetime

from courtbook.core.completeness import calculate_venue_config_completeness
from courtbook.core.records import VenueRecord
from courtbook.core.venue_config import normalize_venue_admin_config

NOW = datetime(2026, 2, 21, 12, 0)


def _complete_config(**overrides):
    raw = {
        "drop_in_enabled": True,
        "drop_in_price": 15,
        "operating_hours": [{"day_of_week": 1, "start_time": "08:00", "end_time": "22:00"}],
        "min_advance_lead_time_hours": 2,
        "same_day_cutoff_time": "17:00",
        "review_cadence_days": 30,
        "insurance_document_types": ["certificate_of_insurance"],
        "last_reviewed_at": "2026-02-10T09:00:00",
    }
    raw.update(overrides)
    return normalize_venue_admin_config("v", raw)


def test_fully_configured_venue_scores_100():
    venue = VenueRecord(id="v", hourly_rate=80, insurance_required=True, amenities=("scoreboard",))
    result = calculate_venue_config_completeness(venue, _complete_config(), NOW)
    assert result.score == 100
    assert result.missing_fields == []
    assert result.review_due is False
    assert result.next_review_at == datetime(2026, 3, 12, 9, 0)


def test_defaults_report_missing_fields_in_checklist_order():
    venue = VenueRecord(id="v", hourly_rate=0)
    result = calculate_venue_config_completeness(venue, normalize_venue_admin_config("v", None), NOW)
    assert result.missing_fields == [
        "hourly_rate",
        "operating_hours",
        "same_day_cutoff",
        "amenities",
        "last_reviewed_at",
    ]
    assert result.score == 44


def test_insurance_document_types_only_required_when_venue_requires_insurance():
    config = _complete_config(insurance_document_types=[])
    insured = VenueRecord(id="v", hourly_rate=80, insurance_required=True, amenities=("lights",))
    uninsured = VenueRecord(id="v", hourly_rate=80, insurance_required=False, amenities=("lights",))
    assert calculate_venue_config_completeness(insured, config, NOW).missing_fields == ["insurance_document_types"]
    assert calculate_venue_config_completeness(uninsured, config, NOW).score == 100


def test_review_is_always_due_without_last_review():
    venue = VenueRecord(id="v", hourly_rate=80, amenities=("lights",))
    for cadence in (1, 30, 365):
        result = calculate_venue_config_completeness(
            venue, _complete_config(last_reviewed_at=None, review_cadence_days=cadence), NOW
        )
        assert result.review_due is True
        assert result.next_review_at is None
        assert result.score == 89


def test_review_due_once_cadence_elapses():
    venue = VenueRecord(id="v", hourly_rate=80, amenities=("lights",))
    config = _complete_config(last_reviewed_at="2026-01-01T00:00:00", review_cadence_days=30)
    assert calculate_venue_config_completeness(venue, config, datetime(2026, 1, 30, 23, 59)).review_due is False
    assert calculate_venue_config_completeness(venue, config, datetime(2026, 1, 31, 0, 0)).review_due is True
