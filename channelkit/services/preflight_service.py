"""
Preflight service — read-only export readiness.

Runs the same fetch → normalize → validate path as the export service,
then returns the checklist instead of building an artifact. Nothing is
generated and nothing is written.
"""

import logging
from dataclasses import dataclass

from channelkit.core.models import PreflightCheck, ValidationResult
from channelkit.db.repositories import ChannelRepository, ListingRepository
from channelkit.exporters.exporter_registry import ExporterRegistry
from channelkit.listings.normalizer import find_override, resolve_listing_view
from channelkit.services.listing_loader import ListingLoader
from channelkit.validation.validator import (
    overall_readiness,
    validate_all_channels,
    validate_listing,
)

logger = logging.getLogger(__name__)


@dataclass
class PreflightResponse:
    validation: ValidationResult
    checks: list[PreflightCheck]
    supports_generation: bool = True

    def to_dict(self) -> dict:
        return {
            "success": True,
            "validation": self.validation.model_dump(mode="json"),
            "preflight_checks": [c.model_dump(mode="json") for c in self.checks],
            "supports_generation": self.supports_generation,
        }


class PreflightService:
    """
    Validation and checklist without generation.

    Usage:
        service = PreflightService(listing_repo, channel_repo)
        response = await service.get_preflight(listing_id, channel_id)
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        channel_repo: ChannelRepository,
        exporter_registry: type[ExporterRegistry] = ExporterRegistry,
    ):
        self._loader = ListingLoader(listing_repo, channel_repo)
        self._exporters = exporter_registry

    async def get_preflight(self, listing_id: str, channel_id: str) -> PreflightResponse:
        """
        Validate a listing for one channel and build its checklist.

        Raises:
            ListingNotFoundError / ChannelNotFoundError: Absent records.
            UnsupportedChannelError: No exporter for the channel slug.
        """
        listing = await self._loader.load_listing(listing_id)
        channel = await self._loader.load_channel(channel_id)
        exporter = self._exporters.create(channel.slug, channel.name)

        view = resolve_listing_view(
            listing.base,
            find_override(listing.overrides, channel),
            channel,
            listing_id=str(listing.id),
        )
        validation = exporter.validate(view, channel)
        checks = exporter.get_preflight_checks(view, channel)

        logger.info(
            f"Preflight for listing {listing.id} on {channel.slug}: "
            f"score={validation.score}, ready={validation.is_ready}"
        )
        return PreflightResponse(
            validation=validation,
            checks=checks,
            supports_generation=exporter.supports_generation,
        )

    async def get_listing_readiness(self, listing_id: str) -> dict:
        """
        Validate a listing against every channel it is linked to.

        Channels with an exporter get its family-specific checks; the rest
        are validated against their rules alone.
        """
        listing = await self._loader.load_listing(listing_id)

        views = {
            channel.id: (
                resolve_listing_view(
                    listing.base,
                    find_override(listing.overrides, channel),
                    channel,
                    listing_id=str(listing.id),
                ),
                channel,
            )
            for channel in listing.channels
        }

        def validate(view, channel) -> ValidationResult:
            if self._exporters.is_supported(channel.slug):
                return self._exporters.create(channel.slug).validate(view, channel)
            return validate_listing(view, channel)

        results = validate_all_channels(views, validate=validate)
        return {
            "success": True,
            "listing_id": str(listing.id),
            "channels": {cid: r.model_dump(mode="json") for cid, r in results.items()},
            "overall": overall_readiness(results),
        }
