"""
Amazon readiness checker.

Amazon listings go through Seller Central category templates, which are
not generated here. The checker validates content against Amazon's
listing policy and produces the preflight checklist; ``generate`` refuses.
"""

import re

from channelkit.core.exceptions import ExportNotImplementedError
from channelkit.core.models import (
    Channel,
    ExportArtifact,
    PreflightCheck,
    PreflightStatus,
    ResolvedListingView,
)
from channelkit.exporters.base_exporter import BaseExporter
from channelkit.validation.validator import ValidationIssue

PROMOTIONAL_PHRASES = (
    "free shipping",
    "sale",
    "discount",
    "promo",
    "best seller",
    "hot deal",
)

BULLET_MIN_LENGTH = 10
BULLET_MAX_LENGTH = 255
RECOMMENDED_BULLETS = 5
RECOMMENDED_DESCRIPTION_LENGTH = 300
RECOMMENDED_IMAGES = 5

_PHRASE_PATTERNS = tuple(
    (phrase, re.compile(rf"\b{re.escape(phrase)}\b")) for phrase in PROMOTIONAL_PHRASES
)


def find_promotional_phrases(title: str) -> list[str]:
    """Promotional phrases used as whole words in the title."""
    lowered = (title or "").lower()
    return [phrase for phrase, pattern in _PHRASE_PATTERNS if pattern.search(lowered)]


class AmazonChecker(BaseExporter):
    """Validation and preflight for Amazon. No file generation."""

    supports_generation = False
    file_prefix = "amazon"

    def headers(self) -> list[str]:
        return []

    def build_rows(self, view: ResolvedListingView, channel: Channel) -> list[list]:
        return []

    def generate(self, view: ResolvedListingView, channel: Channel) -> ExportArtifact:
        raise ExportNotImplementedError(slug=channel.slug)

    def extra_issues(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []

        for phrase in find_promotional_phrases(view.title):
            issues.append(
                ValidationIssue.error(
                    "promotional_language",
                    f'{channel.name} does not allow promotional language in titles: "{phrase}"',
                )
            )

        # Length limits come from the channel's bullet rule when it defines them
        rule = channel.rules.bullets
        max_length = BULLET_MAX_LENGTH if rule is None or rule.max_length is None else None
        min_length = BULLET_MIN_LENGTH if rule is None or rule.min_length is None else None
        for index, bullet in enumerate(view.bullets, start=1):
            if max_length and len(bullet) > max_length:
                issues.append(
                    ValidationIssue.error(
                        "bullet_length",
                        f"Bullet {index} exceeds {max_length} characters "
                        f"(current: {len(bullet)})",
                    )
                )
            if min_length and len(bullet) < min_length:
                issues.append(
                    ValidationIssue.warning(
                        "bullet_length",
                        f"Bullet {index} is too short (min {min_length} characters recommended)",
                    )
                )

        if view.description and len(view.description) < RECOMMENDED_DESCRIPTION_LENGTH:
            issues.append(
                ValidationIssue.warning(
                    "description_quality",
                    f"{channel.name} descriptions should be at least "
                    f"{RECOMMENDED_DESCRIPTION_LENGTH} characters for best results",
                )
            )

        if len(view.images) < RECOMMENDED_IMAGES:
            issues.append(
                ValidationIssue.warning(
                    "image_recommendation",
                    f"{channel.name} recommends at least {RECOMMENDED_IMAGES} images "
                    f"(current: {len(view.images)})",
                )
            )
        return issues

    def get_preflight_checks(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[PreflightCheck]:
        title_len = len(view.title)
        title_max = channel.rules.title_max_length or 200
        promotional = find_promotional_phrases(view.title)
        bullet_count = len(view.bullets)
        bullets_in_range = all(
            BULLET_MIN_LENGTH <= len(b) <= BULLET_MAX_LENGTH for b in view.bullets
        )
        description_len = len(view.description)
        image_count = len(view.images)

        return [
            PreflightCheck(
                name="Title Length",
                description=f"Amazon titles max {title_max} characters",
                status=PreflightStatus.PASS if title_len <= title_max else PreflightStatus.FAIL,
                message=f"Title is {title_len} characters" if title_len > title_max else None,
            ),
            PreflightCheck(
                name="Promotional Language",
                description="Amazon prohibits promotional terms in titles",
                status=PreflightStatus.FAIL if promotional else PreflightStatus.PASS,
                message="Remove promotional language from title" if promotional else None,
            ),
            PreflightCheck(
                name="Bullet Points Count",
                description=f"Amazon requires exactly {RECOMMENDED_BULLETS} bullet points",
                status=(
                    PreflightStatus.PASS
                    if bullet_count == RECOMMENDED_BULLETS
                    else PreflightStatus.FAIL
                ),
                message=(
                    f"Currently have {bullet_count} bullets"
                    if bullet_count != RECOMMENDED_BULLETS
                    else None
                ),
            ),
            PreflightCheck(
                name="Bullet Points Length",
                description=(
                    f"Each bullet should be {BULLET_MIN_LENGTH}-{BULLET_MAX_LENGTH} characters"
                ),
                status=PreflightStatus.PASS if bullets_in_range else PreflightStatus.FAIL,
                message=(
                    None
                    if bullets_in_range
                    else f"One or more bullets outside {BULLET_MIN_LENGTH}-"
                    f"{BULLET_MAX_LENGTH} character range"
                ),
            ),
            PreflightCheck(
                name="Description Quality",
                description="Detailed descriptions perform better",
                status=(
                    PreflightStatus.PASS
                    if description_len >= RECOMMENDED_DESCRIPTION_LENGTH
                    else PreflightStatus.WARNING
                ),
                message=(
                    f"Description is {description_len} characters "
                    f"(recommended: {RECOMMENDED_DESCRIPTION_LENGTH}+)"
                    if description_len < RECOMMENDED_DESCRIPTION_LENGTH
                    else None
                ),
            ),
            PreflightCheck(
                name="Image Count",
                description=f"Amazon recommends {RECOMMENDED_IMAGES}+ high-quality images",
                status=(
                    PreflightStatus.PASS
                    if image_count >= RECOMMENDED_IMAGES
                    else PreflightStatus.WARNING
                ),
                message=(
                    f"{image_count} images (recommended: {RECOMMENDED_IMAGES}+)"
                    if image_count < RECOMMENDED_IMAGES
                    else None
                ),
            ),
        ]
