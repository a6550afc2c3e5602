"""
FastAPI dependencies that wire repositories into the services.

Routes depend on these rather than building services inline, so tests
can swap a service through ``app.dependency_overrides``.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from channelkit.config import get_settings
from channelkit.db.database import get_db
from channelkit.db.repositories import (
    ChannelRepository,
    ExportLogRepository,
    ListingChannelRepository,
    ListingRepository,
)
from channelkit.packaging.image_fetcher import ImageFetcher
from channelkit.packaging.package_builder import PackageBuilder
from channelkit.services.export_service import ExportService
from channelkit.services.preflight_service import PreflightService


def get_package_builder() -> PackageBuilder:
    settings = get_settings()
    fetcher = ImageFetcher(
        timeout=settings.image_fetch_timeout_seconds,
        user_agent=settings.image_fetch_user_agent,
    )
    return PackageBuilder(
        fetcher=fetcher,
        max_document_images=settings.max_document_images,
        image_width_inches=settings.document_image_width_inches,
    )


def get_export_service(
    db: AsyncSession = Depends(get_db),
    package_builder: PackageBuilder = Depends(get_package_builder),
) -> ExportService:
    return ExportService(
        listing_repo=ListingRepository(db),
        channel_repo=ChannelRepository(db),
        listing_channel_repo=ListingChannelRepository(db),
        export_log_repo=ExportLogRepository(db),
        package_builder=package_builder,
    )


def get_preflight_service(db: AsyncSession = Depends(get_db)) -> PreflightService:
    return PreflightService(
        listing_repo=ListingRepository(db),
        channel_repo=ChannelRepository(db),
    )
