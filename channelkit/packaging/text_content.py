"""
Plain-text files bundled in export packages: README.txt and
content_copy_paste.txt.
"""

from channelkit.core.models import Channel, ResolvedListingView
from channelkit.exporters.base_exporter import format_price

RULE = "=" * 40
DIVIDER = "-" * 40
WIDE_RULE = "=" * 60


def build_copy_paste_content(
    view: ResolvedListingView,
    channel: Channel,
    image_count: int | None = None,
) -> str:
    """Every listing field as plain text, one section per field."""
    lines = [
        RULE,
        f"{channel.name.upper()} LISTING CONTENT",
        RULE,
        "",
        "TITLE:",
        view.title,
        "",
        DIVIDER,
        "",
        "DESCRIPTION:",
        view.description,
        "",
        DIVIDER,
        "",
    ]

    if view.tags:
        lines += [f"TAGS/KEYWORDS ({len(view.tags)}):", ", ".join(view.tags), "", DIVIDER, ""]

    if view.bullets:
        lines.append("KEY FEATURES:")
        lines += [f"{i}. {bullet}" for i, bullet in enumerate(view.bullets, start=1)]
        lines += ["", DIVIDER, ""]

    if view.materials:
        lines += ["MATERIALS:", ", ".join(view.materials), "", DIVIDER, ""]

    lines.append("PRODUCT DETAILS:")
    if view.quantity:
        lines.append(f"Quantity: {view.quantity}")
    if view.price:
        lines.append(f"Price: {format_price(view.price)}")
    if view.category:
        lines.append(f"Category: {view.category}")
    if view.sku:
        lines.append(f"SKU: {view.sku}")

    total = len(view.images) if image_count is None else image_count
    lines += [
        "",
        RULE,
        "IMAGE FILES:",
        "See 'images' folder in this package",
        f"Total images: {total}",
        RULE,
        "",
    ]
    return "\n".join(lines)


def build_readme(
    view: ResolvedListingView,
    channel: Channel,
    image_count: int,
    has_flat_file: bool,
    score: int | None = None,
) -> str:
    """Package contents, upload workflows and a short listing summary."""
    name = channel.name
    lines = [
        WIDE_RULE,
        f"  {name.upper()} LISTING EXPORT PACKAGE",
        WIDE_RULE,
        "",
        "PACKAGE CONTENTS:",
        "",
        "1. Word Document (.docx)",
        "   - Formatted listing with embedded images",
        "   - Ready to print or edit",
        "",
        "2. Images Folder",
        "   - Product images numbered by listing order (image_1, image_2, ...)",
        f"   - Ready to upload to {name}",
        "",
    ]
    if has_flat_file:
        lines += [
            f"3. CSV File ({channel.slug}_bulk_upload.csv)",
            f"   - Bulk upload format for {name}",
            "",
        ]
    lines += [
        f"{4 if has_flat_file else 3}. Content Copy-Paste File (content_copy_paste.txt)",
        "   - Plain text, organized by field",
        "",
        DIVIDER,
        "",
        "HOW TO USE:",
        "",
        "OPTION 1: Upload Images Individually",
        f"1. Go to the {name} product creation page",
        "2. Upload images from the 'images' folder",
        "3. Copy content from 'content_copy_paste.txt'",
        "4. Paste into the matching fields",
        "",
        "OPTION 2: Use the Word Document",
        "1. Open the .docx file",
        "2. Use it as a reference for manual listing",
        "3. Copy sections as needed",
        "",
    ]
    if has_flat_file:
        lines += [
            "OPTION 3: Bulk Upload",
            f"1. Go to the {name} bulk upload tool",
            "2. Upload the CSV file",
            f"3. Upload images separately through {name}",
            "4. Match image files to products",
            "",
        ]
    lines += [
        DIVIDER,
        "",
        "LISTING SUMMARY:",
        "",
        f"Title: {view.title}",
        f"Platform: {name}",
        f"Images: {image_count} of {len(view.images)} included",
        f"Tags: {len(view.tags)} keywords",
    ]
    if score is not None:
        lines.append(f"Readiness Score: {score}/100")
    lines += [
        "",
        DIVIDER,
        "",
        "TIPS:",
        "- Upload images in order (image_1 first)",
        "- Use the exact title and description",
        "- Add all tags/keywords",
        f"- Check {name} policies before publishing",
        "",
        WIDE_RULE,
        "",
    ]
    return "\n".join(lines)
