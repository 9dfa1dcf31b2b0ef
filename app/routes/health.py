"""
Health check endpoints.
Liveness of the API process and reachability of the relational store.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.settings import settings


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Liveness probe.
    Always 200 while the process is serving requests.
    """
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/db")
async def database_health(db: Session = Depends(get_db)):
    """
    Readiness probe: runs SELECT 1 and reports 503 if the store is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}"
        )

    return {
        "status": "ok",
        "database": db.get_bind().dialect.name,
        "connected": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
