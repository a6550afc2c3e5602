"""
Shopify exporter — product CSV for Shopify's bulk product import.

One row per image. Product-level cells (handle, title, body, tags, SEO)
are filled on the first row only; later rows carry just the image columns,
which is how Shopify attaches extra images to an existing handle.
"""

import logging
from typing import Any

from channelkit.core.models import (
    Channel,
    ImageMetadata,
    PreflightCheck,
    PreflightStatus,
    ResolvedListingView,
)
from channelkit.exporters.base_exporter import (
    BaseExporter,
    format_price,
    slugify,
    strip_html,
    text_to_html,
    truncate,
)
from channelkit.validation.validator import ValidationIssue

logger = logging.getLogger(__name__)

# Quantity Shopify gets when the listing doesn't track inventory
DEFAULT_INVENTORY_QTY = 999

SEO_DESCRIPTION_MAX = 320

# Titles shorter than this are not flagged for all-caps
ALL_CAPS_MIN_LENGTH = 10

SHOPIFY_HEADERS = [
    "Handle",
    "Title",
    "Body (HTML)",
    "Vendor",
    "Type",
    "Tags",
    "Published",
    "Option1 Name",
    "Option1 Value",
    "Variant SKU",
    "Variant Grams",
    "Variant Inventory Tracker",
    "Variant Inventory Qty",
    "Variant Inventory Policy",
    "Variant Fulfillment Service",
    "Variant Price",
    "Variant Compare At Price",
    "Variant Requires Shipping",
    "Variant Taxable",
    "Variant Barcode",
    "Image Src",
    "Image Position",
    "Image Alt Text",
    "Gift Card",
    "SEO Title",
    "SEO Description",
    "Google Shopping / Google Product Category",
    "Google Shopping / Gender",
    "Google Shopping / Age Group",
    "Google Shopping / MPN",
    "Google Shopping / AdWords Grouping",
    "Google Shopping / AdWords Labels",
    "Google Shopping / Condition",
    "Google Shopping / Custom Product",
    "Google Shopping / Custom Label 0",
    "Google Shopping / Custom Label 1",
    "Google Shopping / Custom Label 2",
    "Google Shopping / Custom Label 3",
    "Google Shopping / Custom Label 4",
    "Variant Image",
    "Variant Weight Unit",
    "Variant Tax Code",
    "Cost per item",
    "Status",
]


class ShopifyExporter(BaseExporter):
    """
    Generates Shopify product CSV files.

    Also used for Etsy and TikTok Shop, whose bulk tools accept the same
    column set (see ``exporter_registry``).
    """

    file_prefix = "shopify"

    def headers(self) -> list[str]:
        return list(SHOPIFY_HEADERS)

    def extra_issues(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[ValidationIssue]:
        title = view.title or ""
        if len(title) > ALL_CAPS_MIN_LENGTH and title == title.upper() and title != title.lower():
            return [
                ValidationIssue.warning(
                    "capitalization",
                    f"Avoid using all caps in titles for {channel.name} (may affect SEO)",
                )
            ]
        return []

    def _image_entries(self, view: ResolvedListingView) -> list[ImageMetadata]:
        """Images with alt text. Metadata wins; a listing with no images still gets one row."""
        if view.image_metadata:
            return sorted(
                view.image_metadata,
                key=lambda m: m.position if m.position is not None else 0,
            )
        if view.images:
            return [
                ImageMetadata(url=url, alt_text=view.title, position=index)
                for index, url in enumerate(view.images)
            ]
        return [ImageMetadata(url="", alt_text=view.title, position=0)]

    def build_rows(self, view: ResolvedListingView, channel: Channel) -> list[list[Any]]:
        handle = slugify(view.title)
        quantity = view.quantity or DEFAULT_INVENTORY_QTY
        rows: list[list[Any]] = []

        for index, image in enumerate(self._image_entries(view)):
            first = index == 0
            rows.append([
                handle if first else "",                       # Handle
                view.title if first else "",                   # Title
                text_to_html(view.description) if first else "",  # Body (HTML)
                view.custom_field("vendor", ""),               # Vendor
                view.category,                                 # Type
                ", ".join(view.tags) if first else "",         # Tags
                "true",                                        # Published
                "Title",                                       # Option1 Name
                "Default Title",                               # Option1 Value
                view.sku,                                      # Variant SKU
                "",                                            # Variant Grams
                "",                                            # Variant Inventory Tracker
                quantity if first else "",                     # Variant Inventory Qty
                "deny",                                        # Variant Inventory Policy
                "manual",                                      # Variant Fulfillment Service
                format_price(view.price) if first else "",     # Variant Price
                "",                                            # Variant Compare At Price
                "true",                                        # Variant Requires Shipping
                "true",                                        # Variant Taxable
                "",                                            # Variant Barcode
                image.url,                                     # Image Src
                index + 1,                                     # Image Position
                image.alt_text or view.title,                  # Image Alt Text
                "false",                                       # Gift Card
                view.title if first else "",                   # SEO Title
                truncate(strip_html(view.description), SEO_DESCRIPTION_MAX) if first else "",
                "",                                            # Google Product Category
                "",                                            # Gender
                "",                                            # Age Group
                "",                                            # MPN
                "",                                            # AdWords Grouping
                "",                                            # AdWords Labels
                "new",                                         # Condition
                "false",                                       # Custom Product
                "", "", "", "", "",                            # Custom Labels 0-4
                "",                                            # Variant Image
                "kg",                                          # Variant Weight Unit
                "",                                            # Variant Tax Code
                "",                                            # Cost per item
                "active",                                      # Status
            ])

        logger.debug(f"Built {len(rows)} Shopify rows for '{handle}'")
        return rows

    def get_preflight_checks(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[PreflightCheck]:
        title_len = len(view.title)
        title_max = channel.rules.title_max_length or 255
        if title_len <= 70:
            title_status = PreflightStatus.PASS
        elif title_len <= title_max:
            title_status = PreflightStatus.WARNING
        else:
            title_status = PreflightStatus.FAIL

        description_len = len(view.description)
        tag_count = len(view.tags)

        return [
            PreflightCheck(
                name="Title Length",
                description="Title should be descriptive but not too long",
                status=title_status,
                message=(
                    f"Title is {title_len} characters (recommended: ≤70, max: {title_max})"
                    if title_len > 70
                    else None
                ),
            ),
            self.image_count_check(view, "Multiple images improve conversion"),
            PreflightCheck(
                name="Description Length",
                description="Detailed descriptions perform better",
                status=PreflightStatus.PASS if description_len >= 200 else PreflightStatus.WARNING,
                message=(
                    f"Description is {description_len} characters (recommended: 200+)"
                    if description_len < 200
                    else None
                ),
            ),
            PreflightCheck(
                name="Tags",
                description="Tags help with store navigation",
                status=PreflightStatus.PASS if tag_count >= 3 else PreflightStatus.WARNING,
                message=(
                    "Consider adding more tags for better discoverability"
                    if tag_count < 3
                    else None
                ),
            ),
        ]
