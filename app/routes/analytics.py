"""
Analytics endpoints - public dashboard rollups.
"""

from fastapi import APIRouter, Depends

from app.services.analytics_service import AnalyticsService, get_analytics_service

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/overview")
async def overview(analytics: AnalyticsService = Depends(get_analytics_service)):
    """
    Headline report counts.

    Returns:
        total, resolved (resolved + closed), pending, byWard, byCategory
    """
    return analytics.overview()


@router.get("/trends")
async def trends(analytics: AnalyticsService = Depends(get_analytics_service)):
    """Reports per month."""
    return analytics.trends()


@router.get("/predictions")
async def predictions(analytics: AnalyticsService = Depends(get_analytics_service)):
    return analytics.predictions()
