"""Download resolution use case: follow hoster buttons to a direct file URL.

HubDrive file pages chain three hops::

    hubdrive /file/<id>  --"HubCloud Server"-->  hubcloud page
    hubcloud page        --"Generate Direct Download Link"-->  generated page
    generated page       --"Download [PixelServer : 2]"-->  file URL

The generated page is retried on the mirror host, then scanned for
anchors pointing straight at the file CDN. HubCloud URLs enter the
chain at the second hop and fall back to the ``Download File [..]``
button instead.
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

import structlog

from netvlyx.application.use_cases.extract_content import validate_url
from netvlyx.domain.entities import ResolvedDownload
from netvlyx.domain.exceptions import (
    DownloadResolutionError,
    FetchExhausted,
    InvalidInputUrl,
)
from netvlyx.domain.ports import HosterPagePort, PageFetcherPort

log = structlog.get_logger(__name__)

HUBCLOUD_SERVER_BUTTON = "HubCloud Server"
GENERATE_BUTTON = "Generate Direct Download Link"
PIXELSERVER_BUTTON = "Download [PixelServer : 2]"
DOWNLOAD_FILE_BUTTON = "Download File ["


def with_host(url: str, host: str) -> str:
    """*url* with its scheme and host replaced by ``https://<host>``."""
    parts = urlsplit(url)
    return urlunsplit(("https", host, parts.path, parts.query, parts.fragment))


class ResolveDownloadUseCase:
    """Resolves HubDrive file pages and HubCloud pages to a download URL."""

    def __init__(
        self,
        *,
        fetcher: PageFetcherPort,
        pages: HosterPagePort,
        hubdrive_host: str = "hubdrive.wales",
        mirror_host: str = "90fpsconfig.in",
    ) -> None:
        self._fetcher = fetcher
        self._pages = pages
        self._hubdrive_host = hubdrive_host
        self._mirror_host = mirror_host

    def file_url(self, file_id: str) -> str:
        file_id = file_id.strip().strip("/")
        if not file_id:
            raise InvalidInputUrl("Either 'url' or 'id' is required")
        return f"https://{self._hubdrive_host}/file/{file_id}"

    async def execute(self, url: str | None) -> ResolvedDownload:
        """Resolve one hoster URL.

        Raises:
            InvalidInputUrl: not a HubDrive ``/file/`` URL or a HubCloud URL.
            FetchExhausted: a mandatory hop could not be fetched.
            DownloadResolutionError: a mandatory button is missing.
        """
        target = validate_url(url)
        parts = urlsplit(target)
        host = (parts.hostname or "").lower()

        if "hubcloud" in host:
            log.info("resolve_started", url=target, entry="hubcloud")
            resolved = await self._from_hubcloud(target)
        elif "hubdrive" in host and "/file/" in parts.path:
            log.info("resolve_started", url=target, entry="hubdrive")
            resolved = await self._from_hubdrive(target)
        else:
            raise InvalidInputUrl(f"Not a HubDrive file or HubCloud URL: {target}")

        log.info(
            "resolve_completed",
            url=target,
            method=resolved.method,
            hops=len(resolved.steps),
        )
        return resolved

    async def execute_file_id(self, file_id: str) -> ResolvedDownload:
        return await self.execute(self.file_url(file_id))

    async def _button(self, url: str, button: str) -> str:
        source = await self._fetcher.fetch(url)
        link = self._pages.button_link(source.html, button, url)
        if link is None:
            raise DownloadResolutionError(f'Button "{button}" not found on {url}')
        return link

    async def _from_hubdrive(self, url: str) -> ResolvedDownload:
        server = await self._button(url, HUBCLOUD_SERVER_BUTTON)
        generated = await self._button(server, GENERATE_BUTTON)
        steps = [server, generated]

        generated_html: str | None = None
        try:
            source = await self._fetcher.fetch(generated)
            generated_html = source.html
            link = self._pages.button_link(generated_html, PIXELSERVER_BUTTON, generated)
            if link is not None:
                return ResolvedDownload(url, link, "pixelserver", steps)
        except FetchExhausted:
            log.warning("resolve_generated_page_failed", url=generated)

        mirror = with_host(generated, self._mirror_host)
        try:
            link = await self._button(mirror, PIXELSERVER_BUTTON)
            return ResolvedDownload(url, link, "mirror", [*steps, mirror])
        except (FetchExhausted, DownloadResolutionError) as e:
            log.warning("resolve_mirror_failed", url=mirror, error=str(e))

        try:
            if generated_html is None:
                generated_html = (await self._fetcher.fetch(generated)).html
        except FetchExhausted:
            generated_html = ""
        direct = self._pages.direct_link(generated_html)
        if direct is not None:
            return ResolvedDownload(url, direct, "direct-scan", steps)

        raise DownloadResolutionError(
            "All extraction methods failed. The download link may not be available "
            "or the page structure has changed."
        )

    async def _from_hubcloud(self, url: str) -> ResolvedDownload:
        generated = await self._button(url, GENERATE_BUTTON)
        source = await self._fetcher.fetch(generated)
        for button, method in (
            (PIXELSERVER_BUTTON, "pixelserver"),
            (DOWNLOAD_FILE_BUTTON, "download-file"),
        ):
            link = self._pages.button_link(source.html, button, generated)
            if link is not None:
                return ResolvedDownload(url, link, method, [generated])  # type: ignore[arg-type]
        raise DownloadResolutionError("Both primary and fallback download buttons not found")
