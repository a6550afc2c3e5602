"""Tests for channelkit.core.sentry_config — Sentry initialization and event filtering."""

from unittest.mock import MagicMock, patch

from fastapi import HTTPException

from channelkit.config import AppEnv
from channelkit.core.exceptions import (
    ChannelKitError,
    ExportValidationError,
    GenerationError,
    ListingNotFoundError,
    UnsupportedChannelError,
)
from channelkit.core.models import ValidationResult
from channelkit.core.sentry_config import _filter_events, init_sentry


class TestInitSentry:
    """Verify Sentry SDK initialization behavior."""

    @patch("channelkit.core.sentry_config.sentry_sdk.init")
    def test_skips_init_when_dsn_empty(self, mock_init: MagicMock):
        init_sentry(dsn="", app_env=AppEnv.PRODUCTION, app_version="1.0.0")
        mock_init.assert_not_called()

    @patch("channelkit.core.sentry_config.sentry_sdk.init")
    def test_initializes_with_valid_dsn(self, mock_init: MagicMock):
        init_sentry(
            dsn="https://key@sentry.io/123",
            app_env=AppEnv.STAGING,
            app_version="1.0.0",
            traces_sample_rate=0.2,
            profiles_sample_rate=0.05,
        )
        mock_init.assert_called_once()
        call_kwargs = mock_init.call_args[1]
        assert call_kwargs["environment"] == "staging"
        assert call_kwargs["release"] == "channelkit@1.0.0"
        assert call_kwargs["traces_sample_rate"] == 0.2
        assert call_kwargs["send_default_pii"] is False
        assert call_kwargs["before_send"] is _filter_events


class TestFilterEvents:
    """Verify Sentry event filtering logic."""

    def test_drops_4xx_http_exception(self):
        hint = {"exc_info": (HTTPException, HTTPException(status_code=404), None)}
        assert _filter_events({"exception": {}}, hint) is None

    def test_keeps_500_http_exception(self):
        event = {"exception": {}}
        hint = {"exc_info": (HTTPException, HTTPException(status_code=500), None)}
        assert _filter_events(event, hint) is event

    def test_drops_expected_export_rejections(self):
        validation = ValidationResult(score=50, errors=["Title is required for Etsy"])
        for exc in (
            ExportValidationError(validation),
            ListingNotFoundError(listing_id="abc"),
            UnsupportedChannelError(slug="poshmark", available=["shopify"]),
        ):
            hint = {"exc_info": (type(exc), exc, None)}
            assert _filter_events({}, hint) is None

    def test_tags_generation_error_with_details(self):
        exc = GenerationError(
            "Failed to generate package export",
            details={"stage": "generate", "listing_id": "l-1", "cause": "OSError: disk full"},
        )
        hint = {"exc_info": (GenerationError, exc, None)}
        result = _filter_events({}, hint)
        assert result["tags"]["error_type"] == "GenerationError"
        assert result["tags"]["export_stage"] == "generate"
        assert result["extra"]["listing_id"] == "l-1"
        assert result["extra"]["cause"] == "OSError: disk full"

    def test_tags_base_error_without_details(self):
        exc = ChannelKitError(message="generic error")
        result = _filter_events({}, {"exc_info": (ChannelKitError, exc, None)})
        assert result["tags"]["error_type"] == "ChannelKitError"
        assert "extra" not in result

    def test_passes_regular_exception(self):
        event = {"exception": {}}
        hint = {"exc_info": (ValueError, ValueError("bad value"), None)}
        assert _filter_events(event, hint) is event

    def test_passes_event_without_exc_info(self):
        event = {"message": "something happened"}
        assert _filter_events(event, {}) is event
