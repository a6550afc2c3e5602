"""Tests for channelkit.services.export_service — the export pipeline."""

import base64
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from channelkit.core.exceptions import (
    ChannelNotFoundError,
    ExportNotImplementedError,
    ExportValidationError,
    GenerationError,
    ListingNotFoundError,
    UnsupportedChannelError,
)
from channelkit.core.models import ExportArtifact, ExportFormat
from channelkit.services.export_service import ExportService


def _service(listing, channel, links, package_builder=None, logger=None):
    if listing is not None:
        listing.channel_links = list(links)
    listing_repo = MagicMock()
    listing_repo.get_with_relations = AsyncMock(return_value=listing)
    channel_repo = MagicMock()
    channel_repo.get_by_id = AsyncMock(return_value=channel)
    link_repo = MagicMock()
    link_repo.mark_exported = AsyncMock(return_value=1)
    log_repo = MagicMock()
    log_repo.record = AsyncMock()

    if package_builder is None:
        package_builder = MagicMock()
        package_builder.build_document = AsyncMock(
            return_value=ExportArtifact(
                file_name="mug_etsy.docx", content=b"docx-bytes", content_type="application/docx"
            )
        )
        package_builder.build_package = AsyncMock(
            return_value=ExportArtifact(
                file_name="mug_etsy_package.zip", content=b"zip-bytes", content_type="application/zip"
            )
        )

    service = ExportService(
        listing_repo=listing_repo,
        channel_repo=channel_repo,
        listing_channel_repo=link_repo,
        export_log_repo=log_repo,
        package_builder=package_builder,
        logger=logger,
    )
    return service, link_repo, log_repo, package_builder


class TestLookupFailures:
    @pytest.mark.asyncio
    async def test_listing_not_found(self, store_rows):
        _, channel, _ = store_rows()
        service, _, log_repo, _ = _service(None, channel, [])
        with pytest.raises(ListingNotFoundError):
            await service.generate_export(str(uuid.uuid4()), str(channel.id))
        log_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_listing_id(self, store_rows):
        listing, channel, link = store_rows()
        service, _, _, _ = _service(listing, channel, [link])
        with pytest.raises(ListingNotFoundError) as exc_info:
            await service.generate_export("not-a-uuid", str(channel.id))
        assert exc_info.value.details["listing_id"] == "not-a-uuid"

    @pytest.mark.asyncio
    async def test_channel_not_found(self, store_rows):
        listing, _, link = store_rows()
        service, _, _, _ = _service(listing, None, [link])
        with pytest.raises(ChannelNotFoundError):
            await service.generate_export(str(listing.id), str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_unsupported_channel(self, store_rows):
        listing, channel, link = store_rows(slug="poshmark")
        service, _, log_repo, _ = _service(listing, channel, [link])
        with pytest.raises(UnsupportedChannelError) as exc_info:
            await service.generate_export(str(listing.id), str(channel.id))
        assert "shopify" in exc_info.value.details["available_channels"]
        log_repo.record.assert_not_called()


class TestValidationGate:
    @pytest.mark.asyncio
    async def test_long_title_on_etsy_refused(self, store_rows):
        listing, channel, link = store_rows(override_title="x" * 150, override_tags=["mug"])
        service, link_repo, log_repo, _ = _service(listing, channel, [link])

        with pytest.raises(ExportValidationError) as exc_info:
            await service.generate_export(str(listing.id), str(channel.id), "csv")

        validation = exc_info.value.validation
        assert not validation.is_ready
        assert any("140" in e for e in validation.errors)
        assert exc_info.value.details["validation"]["is_ready"] is False
        log_repo.record.assert_not_called()
        link_repo.mark_exported.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_tags_refused_on_etsy(self, store_rows):
        listing, channel, link = store_rows()
        service, _, _, _ = _service(listing, channel, [link])
        with pytest.raises(ExportValidationError, match="tags required"):
            await service.generate_export(str(listing.id), str(channel.id))


class TestGenerate:
    @pytest.mark.asyncio
    async def test_csv_export_logs_and_marks(self, store_rows):
        listing, channel, link = store_rows(override_tags=["mug", "ceramic"])
        service, link_repo, log_repo, _ = _service(listing, channel, [link])

        response = await service.generate_export(str(listing.id), str(channel.id))

        assert response.format == ExportFormat.CSV
        assert response.validation.is_ready
        payload = response.to_dict()
        assert payload["success"] is True
        assert payload["format"] == "csv"
        content = base64.b64decode(payload["file"]["content"])
        assert content.startswith(b"\xef\xbb\xbfHandle,Title")
        assert payload["file"]["name"].startswith("shopify-hand-thrown-ceramic-coffee-mug-")

        log_repo.record.assert_awaited_once()
        kwargs = log_repo.record.call_args.kwargs
        assert kwargs["listing_id"] == listing.id
        assert kwargs["channel_id"] == channel.id
        assert kwargs["format"] == "csv"
        assert kwargs["file_size"] == len(content)
        link_repo.mark_exported.assert_awaited_once_with(listing.id, channel.id)

    @pytest.mark.asyncio
    async def test_word_alias_builds_document(self, store_rows):
        listing, channel, link = store_rows(override_tags=["mug"])
        service, _, log_repo, builder = _service(listing, channel, [link])

        response = await service.generate_export(str(listing.id), str(channel.id), "word")

        assert response.format == ExportFormat.DOCX
        builder.build_document.assert_awaited_once()
        assert log_repo.record.call_args.kwargs["format"] == "docx"

    @pytest.mark.asyncio
    async def test_package_includes_flat_file(self, store_rows):
        listing, channel, link = store_rows(override_tags=["mug"])
        service, _, _, builder = _service(listing, channel, [link])

        await service.generate_export(str(listing.id), str(channel.id), "zip")

        kwargs = builder.build_package.call_args.kwargs
        assert kwargs["flat_file"].file_name.endswith(".csv")
        assert kwargs["score"] == 100

    @pytest.mark.asyncio
    async def test_package_without_flat_file(self, store_rows):
        listing, channel, link = store_rows(override_tags=["mug"])
        service, _, _, builder = _service(listing, channel, [link])

        await service.generate_export(
            str(listing.id), str(channel.id), ExportFormat.PACKAGE, include_flat_file=False
        )
        assert builder.build_package.call_args.kwargs["flat_file"] is None

    @pytest.mark.asyncio
    async def test_invalid_format_rejected(self, store_rows):
        listing, channel, link = store_rows(override_tags=["mug"])
        service, _, _, _ = _service(listing, channel, [link])
        with pytest.raises(ValueError):
            await service.generate_export(str(listing.id), str(channel.id), "pdf")


class TestCheckerOnlyChannel:
    def _amazon_rows(self, store_rows):
        return store_rows(
            slug="amazon",
            override_bullets=[f"Feature number {i} described" for i in range(5)],
        )

    @pytest.mark.asyncio
    async def test_csv_not_implemented(self, store_rows):
        listing, channel, link = self._amazon_rows(store_rows)
        service, _, log_repo, _ = _service(listing, channel, [link])
        with pytest.raises(ExportNotImplementedError):
            await service.generate_export(str(listing.id), str(channel.id), "csv")
        log_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_package_skips_flat_file(self, store_rows):
        listing, channel, link = self._amazon_rows(store_rows)
        service, _, log_repo, builder = _service(listing, channel, [link])

        await service.generate_export(str(listing.id), str(channel.id), "package")

        assert builder.build_package.call_args.kwargs["flat_file"] is None
        log_repo.record.assert_awaited_once()


class TestGenerationFailure:
    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self, store_rows):
        listing, channel, link = store_rows(override_tags=["mug"])
        builder = MagicMock()
        builder.build_document = AsyncMock(side_effect=RuntimeError("disk full"))
        service, link_repo, log_repo, _ = _service(listing, channel, [link], package_builder=builder)

        with pytest.raises(GenerationError) as exc_info:
            await service.generate_export(str(listing.id), str(channel.id), "docx")

        details = exc_info.value.details
        assert details["stage"] == "generate"
        assert details["listing_id"] == str(listing.id)
        assert details["channel_slug"] == "etsy"
        assert details["format"] == "docx"
        assert details["cause"] == "RuntimeError: disk full"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        log_repo.record.assert_not_called()
        link_repo.mark_exported.assert_not_called()


class TestLogging:
    @pytest.mark.asyncio
    async def test_injected_logger_gets_bound_context(self, store_rows):
        listing, channel, link = store_rows(override_tags=["mug"])
        logger = MagicMock()
        service, _, _, _ = _service(listing, channel, [link], logger=logger)

        await service.generate_export(str(listing.id), str(channel.id))

        bind_kwargs = logger.bind.call_args.kwargs
        assert bind_kwargs["listing_id"] == str(listing.id)
        assert bind_kwargs["channel_id"] == str(channel.id)
        assert bind_kwargs["format"] == "csv"

    @pytest.mark.asyncio
    async def test_each_stage_logged_in_order(self, store_rows):
        listing, channel, link = store_rows(override_tags=["mug"])
        logger = MagicMock()
        service, _, _, _ = _service(listing, channel, [link], logger=logger)

        await service.generate_export(str(listing.id), str(channel.id))

        request_log = logger.bind.return_value
        request_log.info.assert_called_once_with("export_started", stage="fetch")
        channel_log = request_log.bind.return_value
        channel_log.debug.assert_called_once_with("export_resolving", stage="resolve")
        events = [(c.args[0], c.kwargs["stage"]) for c in channel_log.info.call_args_list]
        assert events == [("export_generating", "generate"), ("export_completed", "record")]
