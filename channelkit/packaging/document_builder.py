"""
Word document rendering of a resolved listing (python-docx).

Layout: title heading, platform line, product images, description,
tags, key features, materials and product details. Sections with no
content are left out, except the description and details headings.
"""

import io
import logging
from collections.abc import Sequence

import docx
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from channelkit.core.models import Channel, ResolvedListingView
from channelkit.exporters.base_exporter import format_price
from channelkit.packaging.image_fetcher import ImageFetchResult

logger = logging.getLogger(__name__)

DOCX_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)


def image_placeholder(position: int, url: str) -> str:
    return f"[Image {position}: {url}]"


def _add_images(
    document,
    view: ResolvedListingView,
    images: Sequence[ImageFetchResult],
    max_images: int,
    width_inches: float,
) -> None:
    by_position = {result.position: result for result in images}

    for position, url in enumerate(view.images[:max_images], start=1):
        paragraph = document.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = paragraph.add_run()

        result = by_position.get(position)
        if result is not None and result.ok:
            try:
                run.add_picture(io.BytesIO(result.data), width=Inches(width_inches))
                continue
            except Exception as e:
                logger.warning(f"Failed to embed image {position}: {e}")

        paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
        run.text = image_placeholder(position, url)
        run.italic = True


def _add_detail(document, label: str, value: str) -> None:
    paragraph = document.add_paragraph()
    paragraph.add_run(f"{label}: ").bold = True
    paragraph.add_run(value)


def build_listing_document(
    view: ResolvedListingView,
    channel: Channel,
    images: Sequence[ImageFetchResult] = (),
    max_images: int = 5,
    image_width_inches: float = 4.0,
) -> bytes:
    """
    Render a listing as a .docx file.

    Args:
        view: Listing with the channel override applied.
        channel: Target channel (its name goes on the platform line).
        images: Download results for ``view.images``, matched by position.
            Positions without a successful result get a placeholder line.
        max_images: How many leading images to embed.
        image_width_inches: Rendered width of each embedded image.

    Returns:
        The document as bytes.
    """
    document = docx.Document()

    heading = document.add_heading(view.title, level=1)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

    platform = document.add_paragraph().add_run(f"Platform: {channel.name}")
    platform.bold = True
    platform.font.size = Pt(12)

    if view.images:
        document.add_heading("Product Images", level=2)
        _add_images(document, view, images, max_images, image_width_inches)

    document.add_heading("Description", level=2)
    for line in view.description.split("\n"):
        if line.strip():
            document.add_paragraph(line)

    if view.tags:
        document.add_heading("Tags/Keywords", level=2)
        document.add_paragraph(", ".join(view.tags))

    if view.bullets:
        document.add_heading("Key Features", level=2)
        for bullet in view.bullets:
            document.add_paragraph(f"• {bullet}")

    if view.materials:
        document.add_heading("Materials", level=2)
        document.add_paragraph(", ".join(view.materials))

    document.add_heading("Product Details", level=2)
    if view.quantity:
        _add_detail(document, "Quantity", str(view.quantity))
    if view.price:
        _add_detail(document, "Price", format_price(view.price))
    if view.category:
        _add_detail(document, "Category", view.category)
    if view.sku:
        _add_detail(document, "SKU", view.sku)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
