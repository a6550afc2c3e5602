"""
Listing normalizer — merges base content with a per-channel override.

Field-level fallback: an override value wins only when it is present and
non-empty. An empty override list means "no override", not "clear the
field". The base record carries no tags or bullets, so those fall back to
empty.
"""

from collections.abc import Iterable, Sequence

from channelkit.core.models import (
    Channel,
    ChannelOverride,
    ListingBase,
    ResolvedListingView,
)


def find_override(
    overrides: Iterable[ChannelOverride] | None,
    channel: Channel,
) -> ChannelOverride | None:
    """
    Select the override for a channel.

    Matches on channel id first, then on channel slug.
    """
    candidates = list(overrides or [])
    for override in candidates:
        if override.channel_id and override.channel_id == channel.id:
            return override
    for override in candidates:
        if override.channel_slug and override.channel_slug == channel.slug:
            return override
    return None


def _pick_text(override_value: str | None, base_value: str) -> str:
    if override_value and override_value.strip():
        return override_value
    return base_value or ""


def _pick_list(override_value: Sequence[str] | None, base_value: Sequence[str]) -> tuple[str, ...]:
    if override_value:
        return tuple(override_value)
    return tuple(base_value or ())


def resolve_listing_view(
    base: ListingBase,
    override: ChannelOverride | None,
    channel: Channel,
    listing_id: str = "",
) -> ResolvedListingView:
    """
    Apply an optional override on top of the base listing.

    Args:
        base: Canonical listing content.
        override: Channel-specific delta, or None.
        channel: Target channel.
        listing_id: Identifier carried into the view for file naming.

    Returns:
        A frozen ResolvedListingView. Inputs are not modified.
    """
    if override is None:
        override = ChannelOverride(channel_id=channel.id, channel_slug=channel.slug)

    price = override.price if override.price is not None else base.price

    return ResolvedListingView(
        listing_id=listing_id,
        channel_id=channel.id,
        channel_slug=channel.slug,
        title=_pick_text(override.title, base.title),
        description=_pick_text(override.description, base.description),
        price=price,
        quantity=base.quantity,
        category=base.category,
        sku=base.sku,
        materials=_pick_list(override.materials, base.materials),
        tags=_pick_list(override.tags, ()),
        bullets=_pick_list(override.bullets, ()),
        images=tuple(base.images),
        image_metadata=tuple(base.image_metadata),
        video=base.video,
        custom_fields=dict(override.custom_fields),
    )
