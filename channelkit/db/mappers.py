"""
ORM → domain mapping helpers for ChannelKit.

Converts listing-store rows (Listing, ListingImage, ListingChannel,
Channel) into the pipeline's Pydantic models. Rows written by the
upstream editor may hold nulls in JSON columns and list fields; every
mapper tolerates them.

Usage:
    row = await ListingRepository(session).get_with_relations(listing_id)
    base = listing_base_from_model(row)
    overrides = [
        override_from_model(link, channel_slug=link.channel.slug)
        for link in row.channel_links
    ]
"""

from channelkit.channels.registry import ChannelRegistry, get_channel_registry
from channelkit.core.models import (
    Channel,
    ChannelOverride,
    ChannelRules,
    ExportFormatCategory,
    ImageMetadata,
    ListingBase,
)
from channelkit.db.models import Channel as ChannelRow
from channelkit.db.models import Listing, ListingChannel


def _as_list(value) -> list:
    if isinstance(value, list):
        return [v for v in value if v is not None]
    return []


def channel_from_model(row: ChannelRow, registry: ChannelRegistry | None = None) -> Channel:
    """
    Map a Channel row to the domain Channel.

    Rules stored on the row override the catalog rules key by key.
    Slugs the catalog doesn't know keep their stored rules and format.
    """
    registry = registry or get_channel_registry()

    if row.slug in registry:
        return registry.resolve(
            channel_id=str(row.id),
            slug=row.slug,
            name=row.name,
            stored_rules=row.validation_rules,
        )

    try:
        export_format = ExportFormatCategory(row.export_format)
    except ValueError:
        export_format = ExportFormatCategory.FLAT_TEXT

    return Channel(
        id=str(row.id),
        slug=row.slug,
        name=row.name,
        export_format=export_format,
        rules=ChannelRules.from_store(row.validation_rules) or ChannelRules(),
    )


def listing_base_from_model(listing: Listing) -> ListingBase:
    """
    Map a Listing row to ListingBase.

    Images come from listing_images ordered by position; rows without any
    fall back to the URLs kept inline in ``base_data``.
    """
    image_rows = sorted(listing.images or [], key=lambda img: img.position)
    if image_rows:
        images = [img.url for img in image_rows]
        metadata = [
            ImageMetadata(url=img.url, alt_text=img.alt_text or "", position=img.position)
            for img in image_rows
        ]
    else:
        base_data = listing.base_data if isinstance(listing.base_data, dict) else {}
        images = [str(url) for url in _as_list(base_data.get("images"))]
        metadata = []

    return ListingBase(
        title=listing.title,
        description=listing.description,
        price=listing.price or 0.0,
        quantity=listing.quantity,
        category=listing.category,
        sku=listing.sku,
        materials=_as_list(listing.materials),
        images=images,
        image_metadata=metadata,
        video=listing.video_url,
    )


def override_from_model(link: ListingChannel, channel_slug: str = "") -> ChannelOverride:
    """Map a ListingChannel row to the per-channel override."""
    custom_fields = link.custom_fields if isinstance(link.custom_fields, dict) else {}
    return ChannelOverride(
        channel_id=str(link.channel_id),
        channel_slug=channel_slug,
        title=link.override_title,
        description=link.override_description,
        tags=_as_list(link.override_tags),
        bullets=_as_list(link.override_bullets),
        materials=_as_list(link.override_materials),
        price=link.override_price,
        custom_fields=custom_fields,
    )
