"""
Export log repository — append-only.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from channelkit.db.models import ExportLog
from channelkit.db.repositories.base_repo import BaseRepository


class ExportLogRepository(BaseRepository[ExportLog]):
    """Repository for export_logs rows. Rows are never updated or deleted."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ExportLog)

    async def record(
        self,
        listing_id: uuid.UUID,
        channel_id: uuid.UUID,
        format: str,
        file_name: str,
        file_size: int = 0,
        score: int = 0,
    ) -> ExportLog:
        """Append one export event."""
        return await self.create(
            listing_id=listing_id,
            channel_id=channel_id,
            format=format,
            file_name=file_name,
            file_size=file_size,
            score=score,
        )
