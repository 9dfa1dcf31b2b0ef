"""
Ward endpoints - reference data for forms and filters.
"""

from fastapi import APIRouter, Depends

from app.services.ward_service import WardService, get_ward_service

router = APIRouter(prefix="/wards", tags=["Wards"])


@router.get("")
async def list_wards(wards: WardService = Depends(get_ward_service)):
    """All wards, alphabetical."""
    return wards.list_wards()
