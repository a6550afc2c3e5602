"""
Listing readiness API endpoints.

Provides:
- GET /api/v1/listings/{listing_id}/readiness — Per-channel validation and summary
"""

from fastapi import APIRouter, Depends

from channelkit.api.deps import get_preflight_service
from channelkit.services.preflight_service import PreflightService

router = APIRouter(prefix="/listings", tags=["Listings"])


@router.get("/{listing_id}/readiness", summary="Multi-channel readiness")
async def get_listing_readiness(
    listing_id: str,
    service: PreflightService = Depends(get_preflight_service),
):
    """
    Validate a listing against every channel it is linked to.

    Returns per-channel results keyed by channel id plus an overall
    summary (ready count, average score, critical errors).
    """
    return await service.get_listing_readiness(listing_id)
