"""
Reference data seeding for Madurai Clean.

Wards are immutable reference data; they are inserted once when the wards
table is empty, together with a couple of cleanup events, a system admin
and a few sample reports so the dashboard is never blank.
"""

from datetime import datetime, time, timedelta, timezone
from typing import Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from app.core.settings import settings
from app.models.enums import ReportStatus, Urgency, UserRole
from app.models.tables import CleanupEvent, Report, User, Ward
from app.utils.security import get_password_hash

logger = logging.getLogger(__name__)


WARDS = [
    {"name": "Meenakshi Amman Temple Area", "zone": "Central"},
    {"name": "Anna Nagar", "zone": "East"},
    {"name": "K.K. Nagar", "zone": "East"},
    {"name": "Sellur", "zone": "North"},
    {"name": "Tirupparankundram", "zone": "South"},
    {"name": "Ellis Nagar", "zone": "West"},
    {"name": "Tallakulam", "zone": "North"},
    {"name": "Simmakkal", "zone": "Central"},
]

# Scheduled relative to the day of seeding so they are always upcoming
EVENTS = [
    {
        "ward_id": 1,
        "title": "Meenakshi Temple Perimeter Clean",
        "days_ahead": 14,
        "at": time(9, 0),
        "location": "East Tower Entrance",
    },
    {
        "ward_id": 2,
        "title": "Anna Nagar Park Restoration",
        "days_ahead": 19,
        "at": time(7, 30),
        "location": "Anna Nagar Main Park",
    },
]

SAMPLE_REPORTS = [
    {
        "ward_id": 1,
        "category": "Garbage Pile",
        "urgency": Urgency.HIGH,
        "description": "Large garbage accumulation near the East Tower of Meenakshi Temple.",
        "lat": 9.9195,
        "lng": 78.1215,
    },
    {
        "ward_id": 2,
        "category": "Clogged Drain",
        "urgency": Urgency.MEDIUM,
        "description": "Drainage blocked after heavy rain near Anna Nagar water tank.",
        "lat": 9.9252,
        "lng": 78.1450,
    },
    {
        "ward_id": 3,
        "category": "Illegal Dumping",
        "urgency": Urgency.CRITICAL,
        "description": "Construction debris dumped on the roadside in K.K. Nagar.",
        "lat": 9.9350,
        "lng": 78.1550,
    },
]


def seed_wards(db: Session) -> int:
    """Insert the ward list if the table is empty. Returns rows added."""
    if db.query(Ward).count() > 0:
        return 0
    db.add_all(Ward(**ward) for ward in WARDS)
    db.flush()
    return len(WARDS)


def upcoming_events(now: Optional[datetime] = None) -> List[Dict]:
    """Event rows with concrete dates, counted from now."""
    today = (now or datetime.now(timezone.utc)).date()
    rows = []
    for event in EVENTS:
        fields = {k: v for k, v in event.items() if k not in ("days_ahead", "at")}
        day = today + timedelta(days=event["days_ahead"])
        fields["date"] = datetime.combine(day, event["at"], tzinfo=timezone.utc)
        rows.append(fields)
    return rows


def seed_events(db: Session, now: Optional[datetime] = None) -> int:
    if db.query(CleanupEvent).count() > 0:
        return 0
    db.add_all(CleanupEvent(**event) for event in upcoming_events(now))
    db.flush()
    return len(EVENTS)


def seed_admin(db: Session) -> User:
    admin = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
    if admin is None:
        admin = User(
            name="System Admin",
            email=settings.ADMIN_EMAIL,
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            ward_id=1,
        )
        db.add(admin)
        db.flush()
    return admin


def seed_reports(db: Session, owner: User) -> int:
    if db.query(Report).count() > 0:
        return 0
    db.add_all(
        Report(user_id=owner.id, status=ReportStatus.PENDING, image_urls=[], **report)
        for report in SAMPLE_REPORTS
    )
    db.flush()
    return len(SAMPLE_REPORTS)


def seed_reference_data(db: Session, with_samples: bool = True) -> Dict[str, int]:
    """
    Seed wards, and on first run also events, the admin user and sample reports.
    Idempotent: nothing is inserted once wards exist.

    Returns:
        Count of inserted rows per table
    """
    inserted = {"wards": 0, "cleanup_events": 0, "users": 0, "reports": 0}

    inserted["wards"] = seed_wards(db)
    if inserted["wards"] and with_samples:
        inserted["cleanup_events"] = seed_events(db)
        existing_admin = db.query(User).filter(User.email == settings.ADMIN_EMAIL).count()
        admin = seed_admin(db)
        inserted["users"] = 0 if existing_admin else 1
        inserted["reports"] = seed_reports(db, admin)

    db.commit()

    if any(inserted.values()):
        logger.info(f"[SEED] Inserted {inserted}")
    return inserted
