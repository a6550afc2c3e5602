"""
Export orchestration service.

Orchestrates the export pipeline: fetch → resolve exporter → normalize →
validate → generate → log.

Fetch and validation failures are raised before any artifact is built.
Anything unexpected while building the artifact becomes GenerationError
carrying the stage, ids and cause. Image download failures never reach
this layer; the package builder absorbs them.
"""

from dataclasses import dataclass
from enum import StrEnum

import structlog

from channelkit.core.exceptions import (
    ChannelKitError,
    ExportValidationError,
    GenerationError,
)
from channelkit.core.interfaces import IExporter
from channelkit.core.models import (
    Channel,
    ExportArtifact,
    ExportFormat,
    ResolvedListingView,
    ValidationResult,
)
from channelkit.db.repositories import (
    ChannelRepository,
    ExportLogRepository,
    ListingChannelRepository,
    ListingRepository,
)
from channelkit.exporters.exporter_registry import ExporterRegistry
from channelkit.listings.normalizer import find_override, resolve_listing_view
from channelkit.packaging.package_builder import PackageBuilder
from channelkit.services.listing_loader import ListingLoader, parse_uuid


class ExportStage(StrEnum):
    """Pipeline stages, bound into log context and error details."""
    FETCH = "fetch"
    RESOLVE = "resolve"
    VALIDATE = "validate"
    GENERATE = "generate"
    RECORD = "record"


@dataclass
class ExportResponse:
    """Result of a successful export."""

    artifact: ExportArtifact
    validation: ValidationResult
    format: ExportFormat

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        return {
            "success": True,
            "format": self.format.value,
            "file": self.artifact.to_payload(),
            "validation": self.validation.model_dump(mode="json"),
        }


class ExportService:
    """
    Single entry point for producing export artifacts.

    Usage:
        service = ExportService(listing_repo, channel_repo, link_repo, log_repo)
        response = await service.generate_export(listing_id, channel_id, "package")
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        channel_repo: ChannelRepository,
        listing_channel_repo: ListingChannelRepository,
        export_log_repo: ExportLogRepository,
        package_builder: PackageBuilder | None = None,
        exporter_registry: type[ExporterRegistry] = ExporterRegistry,
        logger=None,
    ):
        self._loader = ListingLoader(listing_repo, channel_repo)
        self._links = listing_channel_repo
        self._export_logs = export_log_repo
        self._packages = package_builder or PackageBuilder()
        self._exporters = exporter_registry
        self._logger = logger or structlog.get_logger(__name__)

    async def generate_export(
        self,
        listing_id: str,
        channel_id: str,
        export_format: str | ExportFormat | None = None,
        include_flat_file: bool = True,
    ) -> ExportResponse:
        """
        Produce one export artifact for a listing on a channel.

        Args:
            listing_id: Listing to export.
            channel_id: Target channel.
            export_format: ``csv`` (default), ``docx`` or ``package``;
                ``word`` and ``zip`` are accepted aliases.
            include_flat_file: Bundle the channel CSV inside packages.

        Returns:
            ExportResponse with the artifact and the validation result.

        Raises:
            ListingNotFoundError / ChannelNotFoundError: Absent records.
            UnsupportedChannelError: No exporter for the channel slug.
            ExportValidationError: Blocking validation errors.
            ExportNotImplementedError: CSV requested from a checker-only family.
            GenerationError: Unexpected failure while building the artifact.
        """
        fmt = ExportFormat.parse(export_format)
        log = self._logger.bind(
            listing_id=str(listing_id),
            channel_id=str(channel_id),
            format=fmt.value,
        )

        log.info("export_started", stage=ExportStage.FETCH.value)
        listing = await self._loader.load_listing(listing_id)
        channel = await self._loader.load_channel(channel_id)
        log = log.bind(channel_slug=channel.slug)

        log.debug("export_resolving", stage=ExportStage.RESOLVE.value)
        exporter = self._exporters.create(channel.slug, channel.name)
        view = resolve_listing_view(
            listing.base,
            find_override(listing.overrides, channel),
            channel,
            listing_id=str(listing.id),
        )

        validation = exporter.validate(view, channel)
        if not validation.is_ready:
            log.info(
                "export_rejected",
                stage=ExportStage.VALIDATE.value,
                errors=len(validation.errors),
                score=validation.score,
            )
            raise ExportValidationError(validation)

        log.info("export_generating", stage=ExportStage.GENERATE.value, score=validation.score)
        try:
            artifact = await self._build_artifact(
                fmt, exporter, view, channel, include_flat_file, validation.score
            )
        except ChannelKitError:
            raise
        except Exception as e:
            log.error(
                "export_failed",
                stage=ExportStage.GENERATE.value,
                error=f"{type(e).__name__}: {e}",
                exc_info=True,
            )
            raise GenerationError(
                message=f"Failed to generate {fmt.value} export",
                details={
                    "stage": ExportStage.GENERATE.value,
                    "listing_id": str(listing.id),
                    "channel_id": channel.id,
                    "channel_slug": channel.slug,
                    "format": fmt.value,
                    "cause": f"{type(e).__name__}: {e}",
                },
            ) from e

        channel_uuid = parse_uuid(channel.id)
        await self._export_logs.record(
            listing_id=listing.id,
            channel_id=channel_uuid,
            format=fmt.value,
            file_name=artifact.file_name,
            file_size=artifact.size,
            score=validation.score,
        )
        await self._links.mark_exported(listing.id, channel_uuid)

        log.info(
            "export_completed",
            stage=ExportStage.RECORD.value,
            file_name=artifact.file_name,
            file_size=artifact.size,
        )
        return ExportResponse(artifact=artifact, validation=validation, format=fmt)

    async def _build_artifact(
        self,
        fmt: ExportFormat,
        exporter: IExporter,
        view: ResolvedListingView,
        channel: Channel,
        include_flat_file: bool,
        score: int,
    ) -> ExportArtifact:
        if fmt == ExportFormat.CSV:
            return exporter.generate(view, channel)

        if fmt == ExportFormat.DOCX:
            return await self._packages.build_document(view, channel)

        flat_file = None
        if include_flat_file and exporter.supports_generation:
            flat_file = exporter.generate(view, channel)
        return await self._packages.build_package(view, channel, flat_file=flat_file, score=score)
