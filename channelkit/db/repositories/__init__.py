"""
Database repository layer for ChannelKit.

All repositories inherit from BaseRepository and add entity-specific
query methods over the listing store.

Usage:
    from channelkit.db.repositories import ListingRepository, ExportLogRepository

    listing = await ListingRepository(session).get_with_relations(listing_id)
    await ExportLogRepository(session).record(...)
"""

from channelkit.db.repositories.base_repo import BaseRepository
from channelkit.db.repositories.channel_repo import ChannelRepository
from channelkit.db.repositories.export_log_repo import ExportLogRepository
from channelkit.db.repositories.listing_channel_repo import ListingChannelRepository
from channelkit.db.repositories.listing_repo import ListingRepository

__all__ = [
    "BaseRepository",
    "ChannelRepository",
    "ExportLogRepository",
    "ListingChannelRepository",
    "ListingRepository",
]
