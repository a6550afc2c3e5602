"""
Sequential image downloader for export packages.

Each image is fetched once and reported as an ImageFetchResult, success
or failure. A failed download never aborts the batch; the package builder
turns it into a placeholder in the document and skips it in the folder.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from channelkit.core.exceptions import DownloadError
from channelkit.packaging.filenames import image_extension

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "ChannelKit/1.0"


@dataclass(frozen=True)
class ImageFetchResult:
    """Outcome of downloading one image. ``position`` is 1-based."""

    position: int
    url: str
    ok: bool
    data: bytes = b""
    extension: str = "jpg"
    error: str | None = None


class ImageFetcher:
    """
    Downloads listing images one at a time over HTTP.

    Args:
        client: Shared httpx.AsyncClient. When omitted, a client is opened
            per ``fetch_all`` call and closed afterwards.
        timeout: Per-request timeout in seconds.
        user_agent: User-Agent header sent with each request.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._client = client
        self._timeout = timeout
        self._user_agent = user_agent

    async def fetch(self, client: httpx.AsyncClient, url: str) -> bytes:
        """
        Download one image.

        Raises:
            DownloadError: On a transport error, a non-2xx status or an
                empty body.
        """
        try:
            response = await client.get(
                url,
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DownloadError(url=url, reason=f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise DownloadError(
                url=url,
                reason=f"HTTP {response.status_code}: {response.reason_phrase}",
            )
        if not response.content:
            raise DownloadError(url=url, reason="Downloaded body is empty (0 bytes)")

        return response.content

    async def fetch_all(self, urls: Sequence[str]) -> list[ImageFetchResult]:
        """Download every URL in order, recording each success or failure."""
        if not urls:
            return []

        if self._client is not None:
            return await self._fetch_sequential(self._client, urls)

        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await self._fetch_sequential(client, urls)

    async def _fetch_sequential(
        self, client: httpx.AsyncClient, urls: Sequence[str]
    ) -> list[ImageFetchResult]:
        results: list[ImageFetchResult] = []
        for position, url in enumerate(urls, start=1):
            extension = image_extension(url)
            try:
                data = await self.fetch(client, url)
            except DownloadError as e:
                logger.warning(f"Image {position} download failed: {e.message}")
                results.append(
                    ImageFetchResult(
                        position=position,
                        url=url,
                        ok=False,
                        extension=extension,
                        error=e.reason,
                    )
                )
                continue

            logger.debug(f"Downloaded image {position}: {len(data)} bytes")
            results.append(
                ImageFetchResult(
                    position=position,
                    url=url,
                    ok=True,
                    data=data,
                    extension=extension,
                )
            )

        succeeded = sum(1 for r in results if r.ok)
        logger.info(f"Fetched {succeeded}/{len(results)} images")
        return results
