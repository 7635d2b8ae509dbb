import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from courtbook import models  # noqa: E402,F401
from courtbook.db import Base, SessionLocal, engine  # noqa: E402
from courtbook.logging_config import setup_logging  # noqa: E402
from courtbook.services import (  # noqa: E402
    add_availability_block,
    create_venue,
    upsert_venue_admin_config,
)

DEMO_VENUES = [
    {"name": "Lincoln High School Gym", "hourly_rate": 75, "amenities": ["scoreboard", "bleachers"]},
    {"name": "Eastside Community Court", "hourly_rate": 45, "amenities": ["water fountain"]},
    {
        "name": "Riverside Sports Complex",
        "hourly_rate": 120,
        "instant_booking": True,
        "insurance_required": True,
        "amenities": ["locker rooms", "parking", "scoreboard"],
    },
]


def seed(days: int, open_time: str, close_time: str) -> int:
    Base.metadata.create_all(bind=engine)
    created = 0
    with SessionLocal() as db:
        for data in DEMO_VENUES:
            venue = create_venue(db, **data)
            upsert_venue_admin_config(
                db,
                venue.id,
                {
                    "operating_hours": [
                        {"day_of_week": dow, "start_time": open_time, "end_time": close_time}
                        for dow in range(7)
                    ],
                    "same_day_cutoff_time": "18:00:00",
                    "insurance_document_types": ["certificate_of_insurance"]
                    if data.get("insurance_required")
                    else [],
                },
                mark_reviewed_now=True,
                actor="seed@courtbook.local",
            )
            start = date.today()
            for offset in range(days):
                day = (start + timedelta(days=offset)).isoformat()
                add_availability_block(db, venue.id, day, open_time, close_time)
            created += 1
            print(f"Seeded {venue.name} ({venue.id})")
    return created


def main() -> int:
    parser = argparse.ArgumentParser(description="CourtBook demo data seeder")
    parser.add_argument("--days", type=int, default=30, help="Days of availability to open per venue")
    parser.add_argument("--open", dest="open_time", default="08:00:00", help="Daily opening time")
    parser.add_argument("--close", dest="close_time", default="22:00:00", help="Daily closing time")
    args = parser.parse_args()

    setup_logging()
    count = seed(max(1, args.days), args.open_time, args.close_time)
    print(f"Seeded {count} venues.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
