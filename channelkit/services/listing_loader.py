"""
Listing-store reads shared by the export and preflight services.

Turns ids from the API into domain models, raising the not-found errors
the API maps to 404.
"""

import uuid
from dataclasses import dataclass, field

from channelkit.channels.registry import ChannelRegistry, get_channel_registry
from channelkit.core.exceptions import ChannelNotFoundError, ListingNotFoundError
from channelkit.core.models import Channel, ChannelOverride, ListingBase
from channelkit.db.mappers import channel_from_model, listing_base_from_model, override_from_model
from channelkit.db.repositories import ChannelRepository, ListingRepository


def parse_uuid(value: str | uuid.UUID) -> uuid.UUID | None:
    """Parse an id; None when it isn't a UUID."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


@dataclass
class LoadedListing:
    """A listing's base content plus its per-channel overrides and channels."""

    id: uuid.UUID
    base: ListingBase
    overrides: list[ChannelOverride] = field(default_factory=list)
    channels: list[Channel] = field(default_factory=list)


class ListingLoader:
    """Fetches listings and channels through the repositories."""

    def __init__(
        self,
        listing_repo: ListingRepository,
        channel_repo: ChannelRepository,
        channel_registry: ChannelRegistry | None = None,
    ):
        self._listings = listing_repo
        self._channels = channel_repo
        self._registry = channel_registry or get_channel_registry()

    async def load_listing(self, listing_id: str | uuid.UUID) -> LoadedListing:
        """
        Load a listing with its overrides and linked channels.

        Links and their channels come eager-loaded with the listing row.

        Raises:
            ListingNotFoundError: If the id is malformed or absent.
        """
        parsed = parse_uuid(listing_id)
        if parsed is None:
            raise ListingNotFoundError(listing_id=str(listing_id))

        row = await self._listings.get_with_relations(parsed)
        if row is None:
            raise ListingNotFoundError(listing_id=str(listing_id))

        overrides: list[ChannelOverride] = []
        channels: list[Channel] = []
        for link in row.channel_links:
            slug = link.channel.slug if link.channel is not None else ""
            overrides.append(override_from_model(link, channel_slug=slug))
            if link.channel is not None:
                channels.append(channel_from_model(link.channel, self._registry))

        return LoadedListing(
            id=parsed,
            base=listing_base_from_model(row),
            overrides=overrides,
            channels=channels,
        )

    async def load_channel(self, channel_id: str | uuid.UUID) -> Channel:
        """
        Load a channel with its effective rules.

        Raises:
            ChannelNotFoundError: If the id is malformed or absent.
        """
        parsed = parse_uuid(channel_id)
        if parsed is None:
            raise ChannelNotFoundError(channel_id=str(channel_id))

        row = await self._channels.get_by_id(parsed)
        if row is None:
            raise ChannelNotFoundError(channel_id=str(channel_id))
        return channel_from_model(row, self._registry)
