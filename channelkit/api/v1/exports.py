"""
Export API endpoints.

Provides:
- POST /api/v1/exports — Generate an export artifact (CSV, DOCX or package)
- GET /api/v1/exports/preflight — Validation and checklist, no generation

Errors are rendered by the global exception handlers: 400 for blocking
validation errors, 404 for missing records, 501 for unsupported channels.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, field_validator

from channelkit.api.deps import get_export_service, get_preflight_service
from channelkit.core.models import ExportFormat
from channelkit.services.export_service import ExportService
from channelkit.services.preflight_service import PreflightService

router = APIRouter(prefix="/exports", tags=["Exports"])


# ─── Request Schemas ─────────────────────────────────────────


class ExportRequest(BaseModel):
    """Generate-export request."""
    listing_id: str = Field(..., min_length=1, description="Listing to export")
    channel_id: str = Field(..., min_length=1, description="Target channel")
    format: ExportFormat = Field(
        default=ExportFormat.CSV,
        description="csv (default), docx or package; 'word' and 'zip' are accepted aliases",
    )
    include_flat_file: bool = Field(
        default=True, description="Bundle the channel CSV inside packages"
    )

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: Any) -> ExportFormat:
        return ExportFormat.parse(value)


# ─── Endpoints ───────────────────────────────────────────────


@router.post("", summary="Generate an export")
async def create_export(
    request: ExportRequest,
    service: ExportService = Depends(get_export_service),
):
    """
    Validate a listing for a channel and produce the requested artifact.

    The file content is base64-encoded in ``file.content``.
    """
    response = await service.generate_export(
        listing_id=request.listing_id,
        channel_id=request.channel_id,
        export_format=request.format,
        include_flat_file=request.include_flat_file,
    )
    return response.to_dict()


@router.get("/preflight", summary="Export readiness checklist")
async def get_preflight(
    listing_id: str = Query(..., min_length=1),
    channel_id: str = Query(..., min_length=1),
    service: PreflightService = Depends(get_preflight_service),
):
    """Validation result plus the channel's preflight checklist. Read-only."""
    response = await service.get_preflight(listing_id, channel_id)
    return response.to_dict()
