"""
Seed script for the Madurai Clean database.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Wards only, no sample events/admin/reports: python scripts/seed_db.py --apply --wards-only

Behavior:
  - Creates tables if missing.
  - Inserts wards (and on first run the sample data) via app.config.seed_data.
  - Does nothing when wards already exist.

NOTE: The target database is DATABASE_URL from the environment or .env.
"""

import argparse

from app.config.database import get_session_local, init_db
from app.config.seed_data import SAMPLE_REPORTS, WARDS, seed_reference_data, upcoming_events
from app.core.settings import settings


def describe_seed(with_samples: bool) -> None:
    for ward in WARDS:
        print(f"Preparing: wards/{ward['name']} ({ward['zone']})")
    if not with_samples:
        return
    for event in upcoming_events():
        print(f"Preparing: cleanup_events/{event['title']} on {event['date']:%Y-%m-%d %H:%M}")
    print(f"Preparing: users/{settings.ADMIN_EMAIL} (admin)")
    for report in SAMPLE_REPORTS:
        print(f"Preparing: reports/{report['category']} (ward {report['ward_id']})")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--wards-only", action="store_true", help="Seed wards without sample events, admin or reports")
    args = parser.parse_args()

    with_samples = not args.wards_only
    print(f"Target database: {settings.DATABASE_URL}")
    describe_seed(with_samples)

    if not args.apply:
        print("Dry run complete. Re-run with --apply to write to DB.")
        return

    init_db()
    session = get_session_local()()
    try:
        inserted = seed_reference_data(session, with_samples=with_samples)
    finally:
        session.close()

    if any(inserted.values()):
        print(f"Seeding completed: {inserted}")
    else:
        print("Wards already present; nothing to do.")


if __name__ == "__main__":
    main()
