"""
Custom exception hierarchy for ChannelKit.

All application-specific exceptions inherit from ChannelKitError,
enabling catch-all handling at the API layer while allowing
fine-grained handling in the export pipeline.
"""


class ChannelKitError(Exception):
    """Base exception for all ChannelKit application errors."""

    def __init__(self, message: str = "", details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# ─── Lookup Errors ────────────────────────────────────────────


class NotFoundError(ChannelKitError):
    """A listing or channel record is absent from the persistence store."""

    pass


class ListingNotFoundError(NotFoundError):
    """The requested listing does not exist."""

    def __init__(self, listing_id: str, **kwargs):
        self.listing_id = listing_id
        super().__init__(message="Listing not found", **kwargs)
        self.details.setdefault("listing_id", listing_id)


class ChannelNotFoundError(NotFoundError):
    """The requested channel does not exist."""

    def __init__(self, channel_id: str, **kwargs):
        self.channel_id = channel_id
        super().__init__(message="Channel not found", **kwargs)
        self.details.setdefault("channel_id", channel_id)


# ─── Channel Errors ───────────────────────────────────────────


class UnsupportedChannelError(ChannelKitError):
    """No registered implementation exists for a channel slug."""

    def __init__(self, slug: str, available: list[str], channel_name: str = "", **kwargs):
        self.slug = slug
        self.available = list(available)
        label = f"{channel_name} ({slug})" if channel_name else f"'{slug}'"
        message = (
            f"Export not yet implemented for {label}. "
            f"Available: {', '.join(self.available) or 'none'}"
        )
        super().__init__(message=message, **kwargs)
        self.details.setdefault("available_channels", self.available)


class ExportNotImplementedError(ChannelKitError):
    """A checker-only channel family was asked to generate an artifact."""

    def __init__(self, slug: str, **kwargs):
        self.slug = slug
        message = (
            f"File generation is not yet implemented for '{slug}'. "
            "Validation and preflight checks are available."
        )
        super().__init__(message=message, **kwargs)
        self.details.setdefault("channel_slug", slug)


# ─── Export Errors ────────────────────────────────────────────


class ExportValidationError(ChannelKitError):
    """The resolved listing has blocking errors for the target channel."""

    def __init__(self, validation, **kwargs):
        self.validation = validation
        message = (
            "Listing validation failed. Please fix the following issues: "
            + ", ".join(validation.errors)
        )
        super().__init__(message=message, **kwargs)
        self.details.setdefault("validation", validation.model_dump(mode="json"))
        self.details.setdefault("errors", list(validation.errors))
        self.details.setdefault("warnings", list(validation.warnings))


class DownloadError(ChannelKitError):
    """A single image could not be downloaded. Recovered inside package building."""

    def __init__(self, url: str, reason: str, **kwargs):
        self.url = url
        self.reason = reason
        super().__init__(message=f"Failed to download {url}: {reason}", **kwargs)


class GenerationError(ChannelKitError):
    """
    Unexpected failure while assembling an export artifact.

    Aborts the request. ``details`` carries the stage, the ids involved and
    the underlying exception so operators can triage from the response or
    the error tracker.
    """

    pass
