"""
Analytics Service - read-only rollups over reports.

Counts by status, ward and category, a monthly trend and a naive
next-month projection for the dashboard.
"""

from collections import OrderedDict
from typing import Dict, List, Optional
import logging

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.models.enums import ReportStatus
from app.models.tables import Report, Ward

logger = logging.getLogger(__name__)

TREND_MONTHS = 12
GROWTH_FACTOR = 1.1
PREDICTION_CONFIDENCE = 0.75
FALLBACK_PREDICTION = 5


class AnalyticsService:
    """Aggregate queries for the analytics dashboard."""

    def __init__(self, db: Session):
        self.db = db

    def overview(self) -> Dict:
        """
        Get headline counts and breakdowns.

        Returns:
            {total, resolved, pending, byWard: [{name, count}], byCategory: [{category, count}]}
            where resolved counts both resolved and closed reports
        """
        total = self.db.query(func.count(Report.id)).scalar() or 0
        resolved = (
            self.db.query(func.count(Report.id))
            .filter(Report.status.in_([ReportStatus.RESOLVED, ReportStatus.CLOSED]))
            .scalar()
            or 0
        )
        pending = (
            self.db.query(func.count(Report.id))
            .filter(Report.status == ReportStatus.PENDING)
            .scalar()
            or 0
        )

        by_ward = (
            self.db.query(Ward.name, func.count(Report.id))
            .outerjoin(Report, Report.ward_id == Ward.id)
            .group_by(Ward.id, Ward.name)
            .order_by(Ward.id)
            .all()
        )

        by_category = (
            self.db.query(Report.category, func.count(Report.id))
            .group_by(Report.category)
            .order_by(Report.category)
            .all()
        )

        return {
            "total": total,
            "resolved": resolved,
            "pending": pending,
            "byWard": [{"name": name, "count": count} for name, count in by_ward],
            "byCategory": [{"category": category, "count": count} for category, count in by_category],
        }

    def _month_bucket(self):
        # YYYY-MM label computed by the database
        if self.db.get_bind().dialect.name == "postgresql":
            return func.to_char(Report.created_at, "YYYY-MM")
        return func.strftime("%Y-%m", Report.created_at)

    def _monthly_counts(self, latest: Optional[int] = None) -> "OrderedDict[str, int]":
        """
        Report counts per calendar month, oldest first.

        Args:
            latest: Keep only this many most recent months
        """
        month = self._month_bucket().label("month")
        query = (
            self.db.query(month, func.count(Report.id))
            .filter(Report.created_at.isnot(None))
            .group_by(month)
            .order_by(month.desc())
        )
        if latest is not None:
            query = query.limit(latest)

        return OrderedDict(reversed([(m, count) for m, count in query.all()]))

    def trends(self) -> List[Dict]:
        """
        Monthly report counts, oldest first.

        Only the 12 most recent months that have reports are returned; earlier
        months are left out of the series.
        """
        counts = self._monthly_counts(latest=TREND_MONTHS)
        return [{"month": month, "count": count} for month, count in counts.items()]

    def predictions(self) -> Dict:
        """
        Project next month's report volume as the monthly average plus 10%.
        Needs at least two months of history.
        """
        counts = list(self._monthly_counts().values())

        if len(counts) < 2:
            return {"message": "Insufficient data for prediction", "predicted": FALLBACK_PREDICTION}

        avg = sum(counts) / len(counts)
        return {
            "current_avg": avg,
            "predicted_next_month": round(avg * GROWTH_FACTOR),
            "confidence": PREDICTION_CONFIDENCE,
        }


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)
