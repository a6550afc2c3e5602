"""
Channel registry — the immutable catalog of supported marketplaces.

Each definition is data only: slug, display name, export-format category
and validation rules. Nothing channel-specific is decided here; exporters
and the validator read the rules.

Usage:
    registry = get_channel_registry()
    rules = registry.rules_for("etsy")
    channel = registry.resolve(channel_id="...", slug="etsy", name="Etsy")
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from channelkit.core.exceptions import UnsupportedChannelError
from channelkit.core.models import (
    BulletRule,
    Channel,
    ChannelRules,
    ExportFormatCategory,
    PriceRule,
    TagRule,
)


@dataclass(frozen=True)
class ChannelDefinition:
    """Static description of one marketplace."""

    slug: str
    name: str
    export_format: ExportFormatCategory
    rules: ChannelRules
    summary: str = ""


DEFAULT_CHANNELS: tuple[ChannelDefinition, ...] = (
    ChannelDefinition(
        slug="shopify",
        name="Shopify",
        export_format=ExportFormatCategory.FLAT_TEXT,
        rules=ChannelRules(
            title_max_length=255,
            description_max_length=65535,
            price=PriceRule(required=True),
            min_images=1,
            max_images=250,
        ),
        summary="Perfect for your own online store",
    ),
    ChannelDefinition(
        slug="ebay",
        name="eBay",
        export_format=ExportFormatCategory.FLAT_TEXT,
        rules=ChannelRules(
            title_max_length=80,
            description_max_length=500000,
            price=PriceRule(required=True),
            min_images=1,
            max_images=24,
        ),
        summary="Auction and fixed-price marketplace",
    ),
    ChannelDefinition(
        slug="amazon",
        name="Amazon",
        export_format=ExportFormatCategory.DOCUMENT,
        rules=ChannelRules(
            title_max_length=200,
            description_max_length=2000,
            price=PriceRule(required=True),
            bullets=BulletRule(count=5, required=True, min_length=10, max_length=255),
            min_images=1,
            max_images=9,
        ),
        summary="World's largest marketplace",
    ),
    ChannelDefinition(
        slug="etsy",
        name="Etsy",
        export_format=ExportFormatCategory.FLAT_TEXT,
        rules=ChannelRules(
            title_max_length=140,
            description_max_length=5000,
            tags=TagRule(min_count=1, max_count=13, max_length=20),
            price=PriceRule(required=True, minimum=0.20),
            min_images=1,
            max_images=10,
        ),
        summary="Handmade and vintage marketplace",
    ),
    ChannelDefinition(
        slug="facebook-ig",
        name="Facebook & Instagram",
        export_format=ExportFormatCategory.FLAT_TEXT,
        rules=ChannelRules(
            title_max_length=150,
            description_max_length=5000,
            price=PriceRule(required=True),
            min_images=1,
            max_images=20,
        ),
        summary="Social commerce platform",
    ),
    ChannelDefinition(
        slug="tiktok",
        name="TikTok Shop",
        export_format=ExportFormatCategory.FLAT_TEXT,
        rules=ChannelRules(
            title_max_length=255,
            description_max_length=5000,
            price=PriceRule(required=True),
            min_images=1,
            max_images=9,
        ),
        summary="Social shopping platform",
    ),
)


class ChannelRegistry:
    """Read-only lookup of channel definitions by slug."""

    def __init__(self, definitions: Iterable[ChannelDefinition]):
        entries: dict[str, ChannelDefinition] = {}
        for definition in definitions:
            slug = definition.slug.lower()
            if slug in entries:
                raise ValueError(f"Duplicate channel slug: '{slug}'")
            entries[slug] = definition
        self._entries = MappingProxyType(entries)

    def __contains__(self, slug: object) -> bool:
        return isinstance(slug, str) and slug.lower() in self._entries

    def __iter__(self) -> Iterator[ChannelDefinition]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def slugs(self) -> list[str]:
        return list(self._entries.keys())

    def get(self, slug: str) -> ChannelDefinition:
        """
        Look up a channel definition.

        Raises:
            UnsupportedChannelError: If the slug is not in the catalog.
        """
        definition = self._entries.get((slug or "").lower())
        if definition is None:
            raise UnsupportedChannelError(slug=slug, available=self.slugs())
        return definition

    def rules_for(self, slug: str) -> ChannelRules:
        return self.get(slug).rules

    def export_format_for(self, slug: str) -> ExportFormatCategory:
        return self.get(slug).export_format

    def resolve(
        self,
        channel_id: str,
        slug: str,
        name: str = "",
        stored_rules: dict[str, Any] | None = None,
    ) -> Channel:
        """
        Build a Channel for a stored channel row.

        ``stored_rules`` is the rule JSON kept on the row. Each key it sets
        overrides the catalog value; the catalog supplies everything else.
        """
        definition = self.get(slug)
        return Channel(
            id=channel_id,
            slug=definition.slug,
            name=name or definition.name,
            export_format=definition.export_format,
            rules=ChannelRules.from_store(stored_rules, base=definition.rules),
        )


@lru_cache
def get_channel_registry() -> ChannelRegistry:
    """Get the process-wide registry of built-in channels."""
    return ChannelRegistry(DEFAULT_CHANNELS)
