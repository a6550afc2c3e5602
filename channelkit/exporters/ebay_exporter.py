"""
eBay exporter — File Exchange / Seller Hub bulk upload CSV.

A single "Add" row per listing as a fixed-price, good-till-cancelled
item. eBay refuses listings without a condition or a positive quantity,
so both are blocking here.
"""

from typing import Any

from channelkit.core.models import (
    Channel,
    PreflightCheck,
    PreflightStatus,
    ResolvedListingView,
)
from channelkit.exporters.base_exporter import BaseExporter, format_price, text_to_html
from channelkit.validation.validator import ValidationIssue

EBAY_HEADERS = [
    "Action",
    "Category",
    "StoreCategory",
    "Title",
    "Subtitle",
    "Description",
    "Condition",
    "ConditionDescription",
    "Format",
    "Duration",
    "StartPrice",
    "BuyItNowPrice",
    "Quantity",
    "Location",
    "PayPalEmail",
    "DispatchTimeMax",
    "ShippingService-1:Option",
    "ShippingService-1:Cost",
    "ReturnsAccepted",
    "RefundOption",
    "ReturnsWithin",
    "ShippingCostPaidBy",
    "PicURL",
    "C:Brand",
    "C:MPN",
    "C:UPC",
]

DEFAULT_LOCATION = "United States"
DEFAULT_DISPATCH_DAYS = "3"


class EbayExporter(BaseExporter):
    """Generates eBay File Exchange CSV files."""

    file_prefix = "ebay"

    def headers(self) -> list[str]:
        return list(EBAY_HEADERS)

    def extra_issues(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []

        if not view.quantity or view.quantity <= 0:
            issues.append(
                ValidationIssue.error("quantity", f"Quantity is required for {channel.name}")
            )

        if not view.custom_field("condition"):
            issues.append(
                ValidationIssue.error(
                    "condition",
                    f'Condition is required for {channel.name} (e.g., "New", "Used", "Refurbished")',
                )
            )
        return issues

    def build_rows(self, view: ResolvedListingView, channel: Channel) -> list[list[Any]]:
        # File Exchange takes pipe-separated picture URLs in one cell
        pictures = "|".join(view.images)
        return [[
            "Add",
            view.custom_field("category_id", ""),
            "",
            view.title,
            "",
            text_to_html(view.description),
            view.custom_field("condition", "New"),
            "",
            "FixedPrice",
            "GTC",
            "",
            format_price(view.price),
            view.quantity or 1,
            view.custom_field("location", DEFAULT_LOCATION),
            "",
            DEFAULT_DISPATCH_DAYS,
            "ShippingMethodStandard",
            view.custom_field("shipping_cost", "0.00"),
            "ReturnsAccepted",
            "MoneyBack",
            "Days_30",
            "Buyer",
            pictures,
            view.custom_field("brand", ""),
            view.sku,
            "",
        ]]

    def get_preflight_checks(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[PreflightCheck]:
        title_len = len(view.title)
        title_max = channel.rules.title_max_length or 80
        has_condition = bool(view.custom_field("condition"))
        has_quantity = bool(view.quantity and view.quantity > 0)
        has_category = bool(view.custom_field("category_id"))

        return [
            PreflightCheck(
                name="Title Length",
                description=f"eBay enforces a strict {title_max} character limit",
                status=PreflightStatus.PASS if title_len <= title_max else PreflightStatus.FAIL,
                message=(
                    f"Title is {title_len} characters (max: {title_max})"
                    if title_len > title_max
                    else None
                ),
            ),
            PreflightCheck(
                name="Condition",
                description="eBay requires item condition",
                status=PreflightStatus.PASS if has_condition else PreflightStatus.FAIL,
                message=None if has_condition else "Condition must be specified",
            ),
            self.image_count_check(view, "Multiple images increase buyer confidence"),
            PreflightCheck(
                name="Quantity",
                description="Quantity must be specified",
                status=PreflightStatus.PASS if has_quantity else PreflightStatus.FAIL,
                message=None if has_quantity else "Invalid quantity",
            ),
            PreflightCheck(
                name="Category",
                description="Category helps with visibility",
                status=PreflightStatus.PASS if has_category else PreflightStatus.WARNING,
                message=None if has_category else "Consider adding eBay category ID",
            ),
        ]
