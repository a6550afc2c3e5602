"""
Abstract base classes defining the core contracts for ChannelKit.

Every channel family implements IExporter, so the orchestrator and the
preflight service can treat all marketplaces polymorphically.
"""

from abc import ABC, abstractmethod

from channelkit.core.models import (
    Channel,
    ExportArtifact,
    PreflightCheck,
    ResolvedListingView,
    ValidationResult,
)


class IExporter(ABC):
    """Interface for channel-family exporters."""

    #: False for checker-only families whose generate() is not implemented.
    supports_generation: bool = True

    @abstractmethod
    def validate(self, view: ResolvedListingView, channel: Channel) -> ValidationResult:
        """
        Validate a resolved listing against the channel's requirements.

        Args:
            view: The listing with the channel override applied.
            channel: Target channel, including its rule set.

        Returns:
            ValidationResult with errors, warnings and a readiness score.
            Must be deterministic for identical inputs.
        """
        ...

    @abstractmethod
    def generate(self, view: ResolvedListingView, channel: Channel) -> ExportArtifact:
        """
        Generate the channel's flat export file.

        Args:
            view: The listing with the channel override applied.
            channel: Target channel.

        Returns:
            ExportArtifact holding the encoded file.

        Raises:
            ExportNotImplementedError: If the family is checker-only.
        """
        ...

    @abstractmethod
    def get_preflight_checks(
        self, view: ResolvedListingView, channel: Channel
    ) -> list[PreflightCheck]:
        """
        Build the human-readable export readiness checklist.

        Args:
            view: The listing with the channel override applied.
            channel: Target channel.

        Returns:
            Ordered list of PreflightCheck items.
        """
        ...
