"""
Ward Service - read access to the ward reference table.
"""

from typing import Dict, List

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.models.tables import Ward


class WardService:

    def __init__(self, db: Session):
        self.db = db

    def list_wards(self) -> List[Dict]:
        """All wards, alphabetical by name."""
        wards = self.db.query(Ward).order_by(Ward.name.asc()).all()
        return [{"id": w.id, "name": w.name, "zone": w.zone} for w in wards]


def get_ward_service(db: Session = Depends(get_db)) -> WardService:
    return WardService(db)
