"""
Channel catalog API endpoints.

Provides:
- GET /api/v1/channels — Built-in channels with rules and export support
"""

from fastapi import APIRouter

from channelkit.channels.registry import get_channel_registry
from channelkit.exporters.exporter_registry import ExporterRegistry

router = APIRouter(prefix="/channels", tags=["Channels"])


@router.get("", summary="List supported channels")
async def list_channels():
    """Catalog entries with their rules and whether export is available."""
    channels = []
    for definition in get_channel_registry():
        supported = ExporterRegistry.is_supported(definition.slug)
        channels.append({
            "slug": definition.slug,
            "name": definition.name,
            "summary": definition.summary,
            "export_format": definition.export_format.value,
            "rules": definition.rules.model_dump(mode="json"),
            "supported": supported,
            "supports_generation": (
                supported and ExporterRegistry.create(definition.slug).supports_generation
            ),
        })
    return {"success": True, "channels": channels, "total": len(channels)}
