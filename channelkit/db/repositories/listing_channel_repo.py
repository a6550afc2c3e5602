"""
Listing ↔ channel association repository (per-channel overrides).

Overrides themselves are read through ``ListingRepository.get_with_relations``;
this repository only stamps export times.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from channelkit.db.models import ListingChannel
from channelkit.db.repositories.base_repo import BaseRepository


class ListingChannelRepository(BaseRepository[ListingChannel]):
    """Repository for listing_channels rows."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ListingChannel)

    async def mark_exported(
        self,
        listing_id: uuid.UUID,
        channel_id: uuid.UUID,
        exported_at: datetime | None = None,
    ) -> int:
        """
        Set exported_at on the association. Idempotent.

        Returns:
            Number of rows updated (0 when the listing isn't linked to the channel).
        """
        stmt = (
            update(ListingChannel)
            .where(
                ListingChannel.listing_id == listing_id,
                ListingChannel.channel_id == channel_id,
            )
            .values(exported_at=exported_at or datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
