"""
Facebook & Instagram exporter — Commerce Manager catalog CSV.
"""

from typing import Any

from channelkit.core.models import (
    Channel,
    PreflightCheck,
    PreflightStatus,
    ResolvedListingView,
)
from channelkit.exporters.base_exporter import (
    BaseExporter,
    format_price,
    slugify,
    strip_html,
)

FACEBOOK_HEADERS = [
    "id",
    "title",
    "description",
    "availability",
    "condition",
    "price",
    "link",
    "image_link",
    "additional_image_link",
    "brand",
    "google_product_category",
    "fb_product_category",
    "quantity_to_sell_on_facebook",
    "sale_price",
    "sale_price_effective_date",
    "item_group_id",
    "gender",
    "color",
    "size",
    "age_group",
    "material",
    "pattern",
    "shipping",
    "shipping_weight",
]

DEFAULT_CURRENCY = "USD"
DEFAULT_CATALOG_QTY = 999


class FacebookExporter(BaseExporter):
    """Generates Facebook/Instagram product catalog CSV files."""

    file_prefix = "facebook-instagram"

    def headers(self) -> list[str]:
        return list(FACEBOOK_HEADERS)

    def build_rows(self, view: ResolvedListingView, channel: Channel) -> list[list[Any]]:
        currency = view.custom_field("currency", DEFAULT_CURRENCY)
        availability = "in stock" if view.quantity != 0 else "out of stock"
        return [[
            view.listing_id or slugify(view.title),
            view.title,
            strip_html(view.description),
            availability,
            view.custom_field("condition", "new"),
            f"{format_price(view.price)} {currency}",
            view.custom_field("link", ""),
            view.images[0] if view.images else "",
            ",".join(view.images[1:]),
            view.custom_field("brand", ""),
            view.category,
            "",
            view.quantity or DEFAULT_CATALOG_QTY,
            "",
            "",
            "",
            "",
            "",
            "",
            "",
            ", ".join(view.materials),
            "",
            "",
            "",
        ]]

    def get_preflight_checks(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[PreflightCheck]:
        title_len = len(view.title)
        title_max = channel.rules.title_max_length or 150
        description_len = len(view.description)

        return [
            PreflightCheck(
                name="Title Length",
                description="Concise titles perform better on social",
                status=PreflightStatus.PASS if title_len <= title_max else PreflightStatus.FAIL,
                message=(
                    f"Title is {title_len} characters (max: {title_max})"
                    if title_len > title_max
                    else None
                ),
            ),
            PreflightCheck(
                name="Description",
                description="Clear description helps conversion",
                status=PreflightStatus.PASS if description_len >= 100 else PreflightStatus.WARNING,
                message=(
                    "Consider adding more detail to description"
                    if description_len < 100
                    else None
                ),
            ),
            self.image_count_check(view, "High-quality images critical for social commerce"),
        ]
