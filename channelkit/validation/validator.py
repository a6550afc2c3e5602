"""
Channel validator and readiness scorer.

Evaluates a resolved listing against a channel's rule set. Pure: no I/O,
no mutation of inputs, same result for the same inputs.

Scoring starts at 100 and subtracts a fixed penalty per distinct issue
category, so five over-long tags cost the same as one. Penalties are
calibrated so a single blocking error drops the score below the "good"
threshold (80) while a single warning does not.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from channelkit.core.models import Channel, ResolvedListingView, ValidationResult

ERROR_PENALTY = 25
WARNING_PENALTY = 10


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """One finding. ``category`` groups findings for scoring."""

    category: str
    message: str
    severity: Severity = Severity.ERROR

    @classmethod
    def error(cls, category: str, message: str) -> "ValidationIssue":
        return cls(category=category, message=message, severity=Severity.ERROR)

    @classmethod
    def warning(cls, category: str, message: str) -> "ValidationIssue":
        return cls(category=category, message=message, severity=Severity.WARNING)


# ─── Rule Checks ──────────────────────────────────────────────


def _check_title(view: ResolvedListingView, channel: Channel) -> list[ValidationIssue]:
    title = view.title or ""
    if not title.strip():
        return [ValidationIssue.error("title", f"Title is required for {channel.name}")]

    rules = channel.rules
    if rules.title_max_length and len(title) > rules.title_max_length:
        return [
            ValidationIssue.error(
                "title_length",
                f"Title exceeds maximum length of {rules.title_max_length} characters for "
                f"{channel.name} (current: {len(title)})",
            )
        ]
    if rules.title_min_length and len(title) < rules.title_min_length:
        return [
            ValidationIssue.warning(
                "title_length",
                f"Title should be at least {rules.title_min_length} characters for "
                f"{channel.name} (current: {len(title)})",
            )
        ]
    return []


def _check_description(view: ResolvedListingView, channel: Channel) -> list[ValidationIssue]:
    description = view.description or ""
    if not description.strip():
        return [
            ValidationIssue.error("description", f"Description is required for {channel.name}")
        ]

    rules = channel.rules
    if rules.description_max_length and len(description) > rules.description_max_length:
        return [
            ValidationIssue.error(
                "description_length",
                f"Description exceeds maximum length of {rules.description_max_length} "
                f"characters for {channel.name} (current: {len(description)})",
            )
        ]
    if rules.description_min_length and len(description) < rules.description_min_length:
        return [
            ValidationIssue.warning(
                "description_length",
                f"Description should be at least {rules.description_min_length} "
                f"characters for {channel.name} (current: {len(description)})",
            )
        ]
    return []


def _check_tags(view: ResolvedListingView, channel: Channel) -> list[ValidationIssue]:
    rule = channel.rules.tags
    if rule is None:
        return []

    issues: list[ValidationIssue] = []
    count = len(view.tags)

    if rule.min_count and count < rule.min_count:
        issues.append(
            ValidationIssue.error(
                "tag_count",
                f"At least {rule.min_count} tags required for {channel.name} "
                f"(current: {count})",
            )
        )
    if rule.max_count is not None and count > rule.max_count:
        issues.append(
            ValidationIssue.error(
                "tag_count",
                f"Maximum {rule.max_count} tags allowed for {channel.name} "
                f"(current: {count})",
            )
        )

    if rule.max_length:
        for tag in view.tags:
            if len(tag) > rule.max_length:
                issues.append(
                    ValidationIssue.error(
                        "tag_length",
                        f"Tag '{tag}' exceeds {rule.max_length} characters for "
                        f"{channel.name} (current: {len(tag)})",
                    )
                )
    return issues


def _check_bullets(view: ResolvedListingView, channel: Channel) -> list[ValidationIssue]:
    rule = channel.rules.bullets
    if rule is None:
        return []

    issues: list[ValidationIssue] = []
    count = len(view.bullets)

    if count < rule.count:
        message = (
            f"Exactly {rule.count} bullet points required for {channel.name} "
            f"(current: {count})"
        )
        if rule.required:
            issues.append(ValidationIssue.error("bullet_count", message))
        else:
            issues.append(ValidationIssue.warning("bullet_count", message))
    elif count > rule.count:
        issues.append(
            ValidationIssue.warning(
                "bullet_count",
                f"{channel.name} expects {rule.count} bullet points (current: {count})",
            )
        )

    for index, bullet in enumerate(view.bullets, start=1):
        if rule.max_length and len(bullet) > rule.max_length:
            issues.append(
                ValidationIssue.error(
                    "bullet_length",
                    f"Bullet point {index} exceeds maximum length of "
                    f"{rule.max_length} characters for {channel.name} "
                    f"(current: {len(bullet)})",
                )
            )
        if rule.min_length and len(bullet) < rule.min_length:
            issues.append(
                ValidationIssue.warning(
                    "bullet_length",
                    f"Bullet point {index} should be at least {rule.min_length} "
                    f"characters for {channel.name}",
                )
            )
    return issues


def _check_images(view: ResolvedListingView, channel: Channel) -> list[ValidationIssue]:
    rules = channel.rules
    count = len(view.images)

    if rules.min_images and count < rules.min_images:
        return [
            ValidationIssue.error(
                "image_count",
                f"At least {rules.min_images} images required for {channel.name} "
                f"(current: {count})",
            )
        ]
    if rules.max_images is not None and count > rules.max_images:
        return [
            ValidationIssue.warning(
                "image_count",
                f"Maximum {rules.max_images} images recommended for {channel.name} "
                f"(current: {count})",
            )
        ]
    return []


def _check_price(view: ResolvedListingView, channel: Channel) -> list[ValidationIssue]:
    rule = channel.rules.price
    if rule is None:
        return []

    price = view.price or 0.0
    if rule.required and price <= 0:
        return [ValidationIssue.error("price", f"Price is required for {channel.name}")]

    issues: list[ValidationIssue] = []
    if rule.minimum and price < rule.minimum:
        issues.append(
            ValidationIssue.error(
                "price",
                f"Price must be at least ${rule.minimum:.2f} for {channel.name} "
                f"(current: ${price:.2f})",
            )
        )
    if rule.maximum and price > rule.maximum:
        issues.append(
            ValidationIssue.warning(
                "price_range",
                f"Price is above recommended maximum of ${rule.maximum:.2f} for "
                f"{channel.name} (current: ${price:.2f})",
            )
        )
    return issues


_RULE_CHECKS = (
    _check_title,
    _check_description,
    _check_tags,
    _check_bullets,
    _check_price,
    _check_images,
)


# ─── Scoring ──────────────────────────────────────────────────


def calculate_score(issues: Iterable[ValidationIssue]) -> int:
    """Score 0–100 from the distinct error and warning categories."""
    issues = list(issues)
    error_categories = {i.category for i in issues if i.severity == Severity.ERROR}
    warning_categories = {i.category for i in issues if i.severity == Severity.WARNING}
    score = 100
    score -= len(error_categories) * ERROR_PENALTY
    score -= len(warning_categories) * WARNING_PENALTY
    return max(0, min(100, score))


def collect_issues(view: ResolvedListingView, channel: Channel) -> list[ValidationIssue]:
    """Run every rule-level check for the channel."""
    issues: list[ValidationIssue] = []
    for check in _RULE_CHECKS:
        issues.extend(check(view, channel))
    return issues


def build_result(issues: Sequence[ValidationIssue], channel: Channel) -> ValidationResult:
    return ValidationResult(
        score=calculate_score(issues),
        errors=[i.message for i in issues if i.severity == Severity.ERROR],
        warnings=[i.message for i in issues if i.severity == Severity.WARNING],
        channel_id=channel.id,
        channel_name=channel.name,
    )


def validate_listing(
    view: ResolvedListingView,
    channel: Channel,
    extra_issues: Iterable[ValidationIssue] = (),
) -> ValidationResult:
    """
    Validate a resolved listing against a channel's rules.

    Args:
        view: Listing with the channel override applied.
        channel: Target channel with its rule set.
        extra_issues: Family-specific findings to fold into the result,
            scored the same way as rule-level findings.

    Returns:
        ValidationResult; ``is_ready`` is True iff there are no errors.
    """
    issues = collect_issues(view, channel)
    issues.extend(extra_issues)
    return build_result(issues, channel)


# ─── Aggregation ──────────────────────────────────────────────


def validate_all_channels(
    views: Mapping[str, tuple[ResolvedListingView, Channel]],
    validate: Callable[[ResolvedListingView, Channel], ValidationResult] = validate_listing,
) -> dict[str, ValidationResult]:
    """
    Validate one listing against several channels.

    Args:
        views: Channel id → (resolved view, channel).
        validate: Per-channel validation callable. Exporter ``validate``
            methods fit here when family-specific checks should apply.

    Returns:
        Channel id → ValidationResult.
    """
    return {
        channel_id: validate(view, channel)
        for channel_id, (view, channel) in views.items()
    }


def overall_readiness(results: Mapping[str, ValidationResult]) -> dict:
    """Summarize readiness across channels."""
    values = list(results.values())
    total = len(values)
    ready = sum(1 for r in values if r.is_ready)
    average = round(sum(r.score for r in values) / total) if total else 0

    critical_errors = [
        f"{r.channel_name}: {', '.join(r.errors)}" for r in values if r.errors
    ]

    return {
        "is_all_ready": total > 0 and ready == total,
        "ready_count": ready,
        "total_count": total,
        "average_score": average,
        "critical_errors": critical_errors,
    }
