"""
SQLAlchemy 2.0 ORM models for the listing store.

All models use the modern Mapped/mapped_column syntax. The schema is
owned by the upstream listing editor; ChannelKit reads listings and
channels and writes only export_logs rows and the exported_at marker on
listing_channels.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Unicode,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


def new_uuid() -> uuid.UUID:
    """Generate a new UUID4."""
    return uuid.uuid4()


# ─── Channels ─────────────────────────────────────────────────


class Channel(Base):
    """A marketplace the user can export to."""

    __tablename__ = "channels"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=new_uuid
    )
    slug: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(Unicode(100), nullable=False)
    export_format: Mapped[str] = mapped_column(String(20), default="flat_text", nullable=False)
    # Nested per-field rules, e.g. {"title": {"maxLength": 140}}. Null or {} = catalog rules.
    validation_rules: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    listing_links: Mapped[list["ListingChannel"]] = relationship(back_populates="channel")


# ─── Listings ─────────────────────────────────────────────────


class Listing(Base):
    """Canonical, channel-agnostic listing content."""

    __tablename__ = "listings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=new_uuid
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    title: Mapped[str] = mapped_column(Unicode(500), default="", nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    category: Mapped[str | None] = mapped_column(Unicode(255), nullable=True)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    materials: Mapped[list | None] = mapped_column(JSON, nullable=True)
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Older rows keep image URLs inline as {"images": [...]}
    base_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    images: Mapped[list["ListingImage"]] = relationship(
        back_populates="listing",
        cascade="all, delete-orphan",
        order_by="ListingImage.position",
    )
    channel_links: Mapped[list["ListingChannel"]] = relationship(
        back_populates="listing", cascade="all, delete-orphan"
    )


class ListingImage(Base):
    """One image of a listing, ordered by position."""

    __tablename__ = "listing_images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=new_uuid
    )
    listing_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("listings.id", ondelete="CASCADE"), nullable=False
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    alt_text: Mapped[str | None] = mapped_column(Unicode(500), nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    listing: Mapped["Listing"] = relationship(back_populates="images")

    __table_args__ = (
        Index("ix_listing_images_listing_position", "listing_id", "position"),
    )


class ListingChannel(Base):
    """A listing's association with a channel, carrying the per-channel override."""

    __tablename__ = "listing_channels"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=new_uuid
    )
    listing_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("listings.id", ondelete="CASCADE"), nullable=False
    )
    channel_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("channels.id", ondelete="CASCADE"), nullable=False
    )
    override_title: Mapped[str | None] = mapped_column(Unicode(500), nullable=True)
    override_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    override_tags: Mapped[list | None] = mapped_column(JSON, nullable=True)
    override_bullets: Mapped[list | None] = mapped_column(JSON, nullable=True)
    override_materials: Mapped[list | None] = mapped_column(JSON, nullable=True)
    override_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    custom_fields: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    exported_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    listing: Mapped["Listing"] = relationship(back_populates="channel_links")
    channel: Mapped["Channel"] = relationship(back_populates="listing_links")

    __table_args__ = (
        UniqueConstraint("listing_id", "channel_id", name="uq_listing_channel"),
    )


# ─── Export Log ───────────────────────────────────────────────


class ExportLog(Base):
    """Append-only record of completed exports."""

    __tablename__ = "export_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=new_uuid
    )
    listing_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("listings.id", ondelete="CASCADE"), nullable=False
    )
    channel_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("channels.id", ondelete="CASCADE"), nullable=False
    )
    format: Mapped[str] = mapped_column(String(20), nullable=False)
    file_name: Mapped[str] = mapped_column(Unicode(255), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    exported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        Index("ix_export_logs_listing_exported", "listing_id", "exported_at"),
    )
