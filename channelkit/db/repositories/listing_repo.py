"""
Listing-specific database repository.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from channelkit.db.models import Listing, ListingChannel
from channelkit.db.repositories.base_repo import BaseRepository


class ListingRepository(BaseRepository[Listing]):
    """Repository for listing reads."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Listing)

    async def get_with_relations(self, listing_id: uuid.UUID) -> Listing | None:
        """Load a listing with its images and channel links (and their channels)."""
        stmt = (
            select(Listing)
            .where(Listing.id == listing_id)
            .options(
                selectinload(Listing.images),
                selectinload(Listing.channel_links).selectinload(ListingChannel.channel),
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
