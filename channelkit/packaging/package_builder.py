"""
Package builder — assembles the composite export archive.

Archive layout:
    <title>_<slug>.docx
    images/image_<n>.<ext>          (successful downloads only)
    <slug>_bulk_upload.csv          (when a flat file is supplied)
    README.txt
    content_copy_paste.txt

Images are downloaded once; the document and the images folder are both
built from the same fetch results, so a failed image shows up as a
placeholder line in the document and is simply absent from the folder.
"""

import io
import logging
import zipfile

from channelkit.core.models import Channel, ExportArtifact, ResolvedListingView
from channelkit.packaging.document_builder import DOCX_CONTENT_TYPE, build_listing_document
from channelkit.packaging.filenames import image_archive_name, sanitize_filename
from channelkit.packaging.image_fetcher import ImageFetcher, ImageFetchResult
from channelkit.packaging.text_content import build_copy_paste_content, build_readme

logger = logging.getLogger(__name__)

ZIP_CONTENT_TYPE = "application/zip"
README_NAME = "README.txt"
COPY_PASTE_NAME = "content_copy_paste.txt"


def _stem(view: ResolvedListingView, channel: Channel) -> str:
    return f"{sanitize_filename(view.title) or 'listing'}_{channel.slug}"


def document_file_name(view: ResolvedListingView, channel: Channel) -> str:
    return f"{_stem(view, channel)}.docx"


def package_file_name(view: ResolvedListingView, channel: Channel) -> str:
    return f"{_stem(view, channel)}_package.zip"


def flat_file_name(channel: Channel) -> str:
    return f"{channel.slug}_bulk_upload.csv"


class PackageBuilder:
    """
    Builds standalone documents and full export packages.

    Args:
        fetcher: Image downloader. Defaults to a fresh ImageFetcher.
        max_document_images: Leading images embedded in the document.
        image_width_inches: Rendered width of embedded images.
    """

    def __init__(
        self,
        fetcher: ImageFetcher | None = None,
        max_document_images: int = 5,
        image_width_inches: float = 4.0,
    ):
        self._fetcher = fetcher or ImageFetcher()
        self._max_document_images = max_document_images
        self._image_width_inches = image_width_inches

    def _render_document(
        self,
        view: ResolvedListingView,
        channel: Channel,
        images: list[ImageFetchResult],
    ) -> bytes:
        return build_listing_document(
            view,
            channel,
            images,
            max_images=self._max_document_images,
            image_width_inches=self._image_width_inches,
        )

    async def build_document(
        self, view: ResolvedListingView, channel: Channel
    ) -> ExportArtifact:
        """Standalone .docx. Only the images the document embeds are fetched."""
        images = await self._fetcher.fetch_all(view.images[: self._max_document_images])
        content = self._render_document(view, channel, images)
        return ExportArtifact(
            file_name=document_file_name(view, channel),
            content=content,
            content_type=DOCX_CONTENT_TYPE,
        )

    async def build_package(
        self,
        view: ResolvedListingView,
        channel: Channel,
        flat_file: ExportArtifact | None = None,
        score: int | None = None,
    ) -> ExportArtifact:
        """
        Build the .zip package.

        Args:
            view: Listing with the channel override applied.
            channel: Target channel.
            flat_file: Channel CSV to bundle as ``<slug>_bulk_upload.csv``.
            score: Readiness score shown in the README summary.

        Returns:
            ExportArtifact holding the archive. Image download failures are
            logged and never raised.
        """
        images = await self._fetcher.fetch_all(view.images)
        downloaded = [result for result in images if result.ok]
        if len(downloaded) < len(images):
            logger.warning(
                f"{len(images) - len(downloaded)} of {len(images)} images failed "
                f"to download for listing {view.listing_id or '?'}"
            )

        document = self._render_document(view, channel, images)

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(document_file_name(view, channel), document)

            for result in downloaded:
                archive.writestr(image_archive_name(result.position, result.extension), result.data)

            if flat_file is not None:
                archive.writestr(flat_file_name(channel), flat_file.content)

            archive.writestr(
                README_NAME,
                build_readme(
                    view,
                    channel,
                    image_count=len(downloaded),
                    has_flat_file=flat_file is not None,
                    score=score,
                ),
            )
            archive.writestr(
                COPY_PASTE_NAME,
                build_copy_paste_content(view, channel, image_count=len(downloaded)),
            )

        logger.info(
            f"Built package for {channel.slug}: {len(downloaded)} images, "
            f"flat file={'yes' if flat_file else 'no'}"
        )
        return ExportArtifact(
            file_name=package_file_name(view, channel),
            content=buffer.getvalue(),
            content_type=ZIP_CONTENT_TYPE,
        )
