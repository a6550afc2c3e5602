"""
Registry mapping channel slugs to exporter implementations.

Consumers call ExporterRegistry.create("shopify") without knowing the
concrete class. Unknown slugs fail loudly with the list of supported ones.
"""

from channelkit.core.exceptions import UnsupportedChannelError
from channelkit.core.interfaces import IExporter


class ExporterRegistry:
    """
    Slug → exporter class lookup.

    Usage:
        exporter = ExporterRegistry.create("ebay")
        result = exporter.validate(view, channel)
    """

    _registry: dict[str, type[IExporter]] = {}

    @classmethod
    def register(cls, slug: str, exporter_class: type[IExporter]) -> None:
        """Register an exporter class for a channel slug."""
        cls._registry[slug.lower()] = exporter_class

    @classmethod
    def create(cls, slug: str, channel_name: str = "") -> IExporter:
        """
        Create the exporter for a channel.

        Args:
            slug: Channel slug ("shopify", "ebay", ...).
            channel_name: Display name, used in the error message only.

        Raises:
            UnsupportedChannelError: If no exporter is registered for the slug.
        """
        exporter_class = cls._registry.get((slug or "").lower())
        if exporter_class is None:
            raise UnsupportedChannelError(
                slug=slug,
                available=cls.available_channels(),
                channel_name=channel_name,
            )
        return exporter_class()

    @classmethod
    def is_supported(cls, slug: str) -> bool:
        return (slug or "").lower() in cls._registry

    @classmethod
    def available_channels(cls) -> list[str]:
        """List all registered channel slugs."""
        return list(cls._registry.keys())


# ─── Register exporters ───────────────────────────────────────

def _register_default_exporters() -> None:
    """Register all built-in exporters."""
    from channelkit.exporters.amazon_checker import AmazonChecker
    from channelkit.exporters.ebay_exporter import EbayExporter
    from channelkit.exporters.facebook_exporter import FacebookExporter
    from channelkit.exporters.shopify_exporter import ShopifyExporter

    ExporterRegistry.register("shopify", ShopifyExporter)
    ExporterRegistry.register("ebay", EbayExporter)
    ExporterRegistry.register("facebook-ig", FacebookExporter)
    ExporterRegistry.register("amazon", AmazonChecker)

    # Etsy and TikTok Shop have no dedicated exporter. Both bulk tools
    # accept the Shopify product CSV column set, and each channel's own
    # rules (Etsy tag limits, TikTok title length) still apply through
    # the shared validator.
    ExporterRegistry.register("etsy", ShopifyExporter)
    ExporterRegistry.register("tiktok", ShopifyExporter)


_register_default_exporters()
