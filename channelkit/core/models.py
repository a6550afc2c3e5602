"""
Pydantic domain models for ChannelKit.

These models represent the data flowing through the export pipeline:
ListingBase + ChannelOverride → ResolvedListingView → ValidationResult
→ ExportArtifact
"""

import base64
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    computed_field,
    field_validator,
)

# Readiness score thresholds shared by the validator and the API.
READY_GOOD_THRESHOLD = 80
READY_CAUTION_THRESHOLD = 60


class ExportFormatCategory(StrEnum):
    """What kind of artifact a channel is exported as."""
    FLAT_TEXT = "flat_text"
    DOCUMENT = "document"
    ARCHIVE = "archive"


class ExportFormat(StrEnum):
    """Artifact formats a caller can request."""
    CSV = "csv"
    DOCX = "docx"
    PACKAGE = "package"

    @classmethod
    def parse(cls, value: "str | ExportFormat | None") -> "ExportFormat":
        """Resolve a requested format, accepting legacy aliases. Defaults to CSV."""
        if value is None or value == "":
            return cls.CSV
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        aliases = {"word": cls.DOCX, "zip": cls.PACKAGE, "flat": cls.CSV}
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class PreflightStatus(StrEnum):
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


class ReadinessLevel(StrEnum):
    GOOD = "good"
    CAUTION = "caution"
    POOR = "poor"


# ─── Channel Models ───────────────────────────────────────────


class TagRule(BaseModel):
    """Tag count bounds and per-tag length for a channel."""

    min_count: int = Field(default=0, ge=0)
    max_count: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, gt=0)


class BulletRule(BaseModel):
    """Bullet point expectations for a channel.

    ``required`` decides whether a shortfall blocks export or only warns.
    """

    count: int = Field(..., gt=0)
    required: bool = False
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, gt=0)


class PriceRule(BaseModel):
    """Price bounds. Below ``minimum`` blocks export; above ``maximum`` only warns."""

    required: bool = False
    minimum: float | None = Field(default=None, ge=0)
    maximum: float | None = Field(default=None, gt=0)


# Stored JSON key → model field, per rule section
_TITLE_KEYS = {"maxLength": "title_max_length", "minLength": "title_min_length"}
_DESCRIPTION_KEYS = {
    "maxLength": "description_max_length",
    "minLength": "description_min_length",
}
_IMAGE_KEYS = {"min": "min_images", "max": "max_images"}
_TAG_KEYS = {"min": "min_count", "max": "max_count", "maxLength": "max_length"}
# "count" after "max" so an explicit count wins
_BULLET_KEYS = {
    "max": "count",
    "count": "count",
    "required": "required",
    "minLength": "min_length",
    "maxLength": "max_length",
}
_PRICE_KEYS = {"required": "required", "min": "minimum", "max": "maximum"}


def _pick(source: dict, keys: dict[str, str]) -> dict[str, Any]:
    return {field: source[key] for key, field in keys.items() if source.get(key) is not None}


class ChannelRules(BaseModel):
    """Validation rule set for a channel. Pure data."""

    model_config = ConfigDict(frozen=True)

    title_max_length: int | None = Field(default=None, gt=0)
    title_min_length: int | None = Field(default=None, ge=0)
    description_max_length: int | None = Field(default=None, gt=0)
    description_min_length: int | None = Field(default=None, ge=0)
    tags: TagRule | None = None
    bullets: BulletRule | None = None
    price: PriceRule | None = None
    min_images: int = Field(default=0, ge=0)
    max_images: int | None = Field(default=None, ge=0)

    @classmethod
    def from_store(
        cls,
        raw: dict[str, Any] | None,
        base: "ChannelRules | None" = None,
    ) -> "ChannelRules | None":
        """
        Parse the rule JSON stored on a channel row, layered over ``base``.

        The store keeps rules nested per field, e.g.
        ``{"title": {"maxLength": 80}, "tags": {"max": 13}, "price": {"min": 0.2}}``.
        Every key the row sets replaces the matching value of ``base``;
        everything it leaves out keeps the base value, inside a section too.

        Returns:
            The merged rules; ``base`` itself when nothing usable is stored,
            so None without a base.
        """
        if not isinstance(raw, dict) or not raw:
            return base

        def section(name: str) -> dict:
            value = raw.get(name)
            return value if isinstance(value, dict) else {}

        current = base or cls()
        updates: dict[str, Any] = {
            **_pick(section("title"), _TITLE_KEYS),
            **_pick(section("description"), _DESCRIPTION_KEYS),
            **_pick(section("images"), _IMAGE_KEYS),
        }

        nested = (
            ("tags", TagRule, _TAG_KEYS),
            ("bullets", BulletRule, _BULLET_KEYS),
            ("price", PriceRule, _PRICE_KEYS),
        )
        for name, model, keys in nested:
            stored = _pick(section(name), keys)
            if not stored:
                continue
            existing = getattr(current, name)
            merged = {**(existing.model_dump() if existing else {}), **stored}
            if model is BulletRule and not merged.get("count"):
                continue
            updates[name] = model(**merged)

        if not updates:
            return base
        return cls.model_validate({**current.model_dump(), **updates})


class Channel(BaseModel):
    """A target marketplace with its own content rules and export schema."""

    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    name: str
    export_format: ExportFormatCategory = ExportFormatCategory.FLAT_TEXT
    rules: ChannelRules = Field(default_factory=ChannelRules)


# ─── Listing Models ───────────────────────────────────────────


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class ImageMetadata(BaseModel):
    url: str
    alt_text: str = ""
    position: int | None = None


class ListingBase(BaseModel):
    """The canonical, channel-agnostic product content."""

    title: str = ""
    description: str = ""
    price: float = Field(default=0.0, ge=0)
    quantity: int | None = Field(default=None, ge=0)
    category: str = ""
    sku: str = ""
    materials: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    image_metadata: list[ImageMetadata] = Field(default_factory=list)
    video: str | None = None

    @field_validator("materials", "images", "image_metadata", mode="before")
    @classmethod
    def _coerce_null_lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("title", "description", "category", "sku", mode="before")
    @classmethod
    def _coerce_null_text(cls, value: Any) -> Any:
        return "" if value is None else value


class ChannelOverride(BaseModel):
    """A per-channel delta layered on top of the base content."""

    channel_id: str
    channel_slug: str = ""
    title: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    bullets: list[str] = Field(default_factory=list)
    materials: list[str] = Field(default_factory=list)
    price: float | None = Field(default=None, ge=0)
    custom_fields: dict[str, Any] = Field(default_factory=dict)

    @field_validator("tags", "bullets", "materials", mode="before")
    @classmethod
    def _coerce_null_lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("custom_fields", mode="before")
    @classmethod
    def _coerce_null_fields(cls, value: Any) -> Any:
        return {} if value is None else value


def _read_only(value: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value))


# Snapshot of the override's custom fields; serializes as a plain dict
ReadOnlyFields = Annotated[
    Mapping[str, Any],
    AfterValidator(_read_only),
    PlainSerializer(dict, return_type=dict),
]


class ResolvedListingView(BaseModel):
    """Merged, read-only result of applying an override over the base."""

    model_config = ConfigDict(frozen=True)

    listing_id: str = ""
    channel_id: str = ""
    channel_slug: str = ""
    title: str = ""
    description: str = ""
    price: float = 0.0
    quantity: int | None = None
    category: str = ""
    sku: str = ""
    materials: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    bullets: tuple[str, ...] = ()
    images: tuple[str, ...] = ()
    image_metadata: tuple[ImageMetadata, ...] = ()
    video: str | None = None
    custom_fields: ReadOnlyFields = Field(default_factory=dict, validate_default=True)

    def custom_field(self, name: str, default: Any = None) -> Any:
        value = self.custom_fields.get(name)
        return default if value in (None, "") else value


# ─── Validation & Export Models ───────────────────────────────


class ValidationResult(BaseModel):
    """Outcome of validating a resolved view against one channel."""

    score: int = Field(default=100, ge=0, le=100)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    channel_id: str = ""
    channel_name: str = ""

    @computed_field
    @property
    def is_ready(self) -> bool:
        return not self.errors

    @computed_field
    @property
    def readiness_level(self) -> ReadinessLevel:
        if self.score >= READY_GOOD_THRESHOLD:
            return ReadinessLevel.GOOD
        if self.score >= READY_CAUTION_THRESHOLD:
            return ReadinessLevel.CAUTION
        return ReadinessLevel.POOR


class PreflightCheck(BaseModel):
    """A named, human-readable diagnostic item surfaced before export."""

    name: str
    status: PreflightStatus
    description: str
    message: str | None = None


class ExportArtifact(BaseModel):
    """Binary/text payload produced for a channel."""

    file_name: str
    content: bytes
    content_type: str
    encoding: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    def to_payload(self) -> dict[str, Any]:
        """Serialize for API responses with base64 content."""
        return {
            "name": self.file_name,
            "content": base64.b64encode(self.content).decode("ascii"),
            "content_type": self.content_type,
            "encoding": self.encoding,
        }
