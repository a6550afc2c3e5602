"""
Channel-specific database repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from channelkit.db.models import Channel
from channelkit.db.repositories.base_repo import BaseRepository


class ChannelRepository(BaseRepository[Channel]):
    """Repository for channel reads. Lookups go through ``get_by_id``."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Channel)
