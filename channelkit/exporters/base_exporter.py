"""
Shared machinery for channel-family exporters.

Every exporter validates through the shared validator so rule-level
findings are identical wherever validation runs; families add their own
findings through ``extra_issues``.

CSV output is UTF-8 with a byte-order mark and CRLF line endings, which
is what spreadsheet tools and marketplace bulk importers expect.
"""

import csv
import io
import re
from abc import abstractmethod
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import Any

from channelkit.core.interfaces import IExporter
from channelkit.core.models import (
    Channel,
    ExportArtifact,
    PreflightCheck,
    PreflightStatus,
    ResolvedListingView,
    ValidationResult,
)
from channelkit.validation.validator import ValidationIssue, validate_listing

CSV_CONTENT_TYPE = "text/csv; charset=utf-8"

_TAG_RE = re.compile(r"<[^>]*>")
_SLUG_RE = re.compile(r"[^a-z0-9]+")


# ─── Text Helpers ─────────────────────────────────────────────


def slugify(text: str) -> str:
    """URL-friendly handle: lowercase, runs of non-alphanumerics become '-'."""
    return _SLUG_RE.sub("-", (text or "").lower()).strip("-")


def strip_html(value: str) -> str:
    return _TAG_RE.sub("", value or "")


def text_to_html(text: str) -> str:
    """Blank-line separated paragraphs become <p>, single newlines <br>."""
    if not text:
        return ""
    paragraphs = text.split("\n\n")
    return "".join(
        "<p>" + p.replace("\n", "<br>") + "</p>" for p in paragraphs
    )


def truncate(text: str, max_length: int, suffix: str = "...") -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def format_price(price: float | None) -> str:
    return f"{price or 0:.2f}"


def timestamp(now: datetime | None = None) -> str:
    """Date stamp used in export file names (YYYY-MM-DD)."""
    return (now or datetime.now(UTC)).strftime("%Y-%m-%d")


def format_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> bytes:
    """
    Render rows as CSV bytes.

    Cells are quoted only when they contain a delimiter, quote or line
    break. ``None`` renders as an empty cell.
    """
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return buffer.getvalue().encode("utf-8-sig")


# ─── Base Exporter ────────────────────────────────────────────


class BaseExporter(IExporter):
    """
    Base class for CSV-producing channel families.

    Subclasses define the column set, the rows for a listing and the
    preflight checklist. Checker-only families override ``generate``.
    """

    #: Prefix of generated file names, e.g. "shopify".
    file_prefix: str = ""

    def validate(self, view: ResolvedListingView, channel: Channel) -> ValidationResult:
        return validate_listing(view, channel, self.extra_issues(view, channel))

    def extra_issues(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[ValidationIssue]:
        """Family-specific findings on top of the channel rules."""
        return []

    def generate(self, view: ResolvedListingView, channel: Channel) -> ExportArtifact:
        content = format_csv(self.headers(), self.build_rows(view, channel))
        return ExportArtifact(
            file_name=self.file_name(view),
            content=content,
            content_type=CSV_CONTENT_TYPE,
            encoding="utf-8",
        )

    def file_name(self, view: ResolvedListingView) -> str:
        handle = slugify(view.title) or view.listing_id or "listing"
        return f"{self.file_prefix}-{handle}-{timestamp()}.csv"

    @abstractmethod
    def headers(self) -> list[str]:
        """Column names of the flat file."""
        ...

    @abstractmethod
    def build_rows(self, view: ResolvedListingView, channel: Channel) -> list[list[Any]]:
        """Data rows for one listing, aligned with ``headers()``."""
        ...

    # ─── Preflight Helpers ────────────────────────────────────

    @staticmethod
    def image_count_check(view: ResolvedListingView, description: str) -> PreflightCheck:
        """Shared 'Images' checklist item: 3+ pass, 1–2 warning, 0 fail."""
        count = len(view.images)
        if count >= 3:
            status = PreflightStatus.PASS
        elif count >= 1:
            status = PreflightStatus.WARNING
        else:
            status = PreflightStatus.FAIL
        return PreflightCheck(
            name="Images",
            description=description,
            status=status,
            message=f"{count} image(s) (recommended: 3+)" if count < 3 else None,
        )
