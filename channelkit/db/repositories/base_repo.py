"""
Generic async repository base class.

Provides the data access methods every listing-store repository shares.
"""

import uuid
from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from channelkit.db.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with primary-key reads and inserts.

    Subclasses specify the model class and add entity-specific queries.
    Listing and channel rows are owned upstream, so there is no generic
    update or delete here.
    """

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def get_by_id(self, record_id: uuid.UUID) -> ModelType | None:
        """Get a single record by primary key."""
        return await self.session.get(self.model, record_id)

    async def create(self, **kwargs) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return instance
