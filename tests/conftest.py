"""
Shared test fixtures for ChannelKit test suite.
"""

import base64
import uuid

import pytest

from channelkit.channels.registry import get_channel_registry
from channelkit.core.models import Channel, ChannelOverride, ImageMetadata, ListingBase
from channelkit.db.models import Channel as ChannelRow
from channelkit.db.models import Listing, ListingChannel, ListingImage

# 1x1 transparent PNG, small enough to embed in a .docx
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def make_channel(slug: str, channel_id: str | None = None) -> Channel:
    """Catalog channel with a fresh id."""
    return get_channel_registry().resolve(
        channel_id=channel_id or str(uuid.uuid4()),
        slug=slug,
    )


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def channel_factory():
    """make_channel as a fixture, for tests that need several channels."""
    return make_channel


@pytest.fixture
def sample_listing_base() -> ListingBase:
    """A realistic handmade listing with three images."""
    return ListingBase(
        title="Hand-Thrown Ceramic Coffee Mug",
        description=(
            "A sturdy stoneware mug glazed in speckled oatmeal.\n\n"
            "Holds 12 oz. Dishwasher and microwave safe."
        ),
        price=34.0,
        quantity=12,
        category="Home & Living > Kitchen & Dining > Drinkware",
        sku="MUG-OAT-12",
        materials=["stoneware", "glaze"],
        images=[
            "https://cdn.example.com/mug/front.jpg",
            "https://cdn.example.com/mug/side.png?w=1200",
            "https://cdn.example.com/mug/handle.webp",
        ],
        image_metadata=[
            ImageMetadata(url="https://cdn.example.com/mug/front.jpg", alt_text="Mug front", position=0),
            ImageMetadata(url="https://cdn.example.com/mug/side.png?w=1200", alt_text="Mug side", position=1),
            ImageMetadata(url="https://cdn.example.com/mug/handle.webp", alt_text="", position=2),
        ],
    )


@pytest.fixture
def etsy_channel() -> Channel:
    return make_channel("etsy")


@pytest.fixture
def shopify_channel() -> Channel:
    return make_channel("shopify")


@pytest.fixture
def ebay_channel() -> Channel:
    return make_channel("ebay")


@pytest.fixture
def amazon_channel() -> Channel:
    return make_channel("amazon")


@pytest.fixture
def facebook_channel() -> Channel:
    return make_channel("facebook-ig")


@pytest.fixture
def etsy_override(etsy_channel: Channel) -> ChannelOverride:
    """Etsy-specific tags and a shorter title."""
    return ChannelOverride(
        channel_id=etsy_channel.id,
        channel_slug="etsy",
        title="Speckled Stoneware Mug, Handmade",
        tags=["ceramic mug", "handmade", "stoneware", "coffee lover gift"],
    )


@pytest.fixture
def ebay_override(ebay_channel: Channel) -> ChannelOverride:
    return ChannelOverride(
        channel_id=ebay_channel.id,
        channel_slug="ebay",
        custom_fields={"condition": "New", "category_id": "46223", "brand": "Oat & Ash"},
    )


# ─── Listing Store Rows ──────────────────────────────────────


def make_store_rows(slug: str = "etsy", **link_fields):
    """
    Unsaved ORM rows for one listing linked to one channel.

    Returns (listing, channel, link). Extra keyword arguments set
    ListingChannel override columns.
    """
    listing = Listing(
        id=uuid.uuid4(),
        title="Hand-Thrown Ceramic Coffee Mug",
        description="A sturdy stoneware mug glazed in speckled oatmeal.",
        price=34.0,
        quantity=12,
        category="Drinkware",
        sku="MUG-OAT-12",
        materials=["stoneware"],
    )
    listing.images = [
        ListingImage(id=uuid.uuid4(), url=f"https://cdn.example.com/mug/{i}.jpg", position=i)
        for i in range(3)
    ]
    registry = get_channel_registry()
    channel = ChannelRow(
        id=uuid.uuid4(),
        slug=slug,
        name=registry.get(slug).name if slug in registry else slug.title(),
        export_format="flat_text",
        validation_rules=None,
    )
    link = ListingChannel(
        id=uuid.uuid4(),
        listing_id=listing.id,
        channel_id=channel.id,
        **link_fields,
    )
    link.channel = channel
    return listing, channel, link


@pytest.fixture
def store_rows():
    """make_store_rows as a fixture."""
    return make_store_rows
