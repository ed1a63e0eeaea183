"""Link classification, validation, rewriting and deduplication."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

import structlog

from netvlyx.domain.entities import (
    DownloadGroup,
    DownloadLink,
    EpisodeRecord,
    LinkStatus,
)

log = structlog.get_logger(__name__)

# Ordered: first matching rule wins. Each rule is a tuple of substrings
# that must all be present in the URL.
SERVER_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("hubdrive", "/file/"), "NetVlyx Server"),
    (("hubcdn.fans/file/",), "VlyJes Server"),
    (("techyboy4u.com/?id=",), "Vlyx Server"),
    (("taazabull24.com/?id=",), "Vlyx Server"),
    (("hubstream",), "HDStream4u"),
    (("hdstream4u.com",), "HDStream4u"),
    (("drive.google",), "Google Drive"),
    (("mediafire",), "MediaFire"),
    (("mega.nz",), "MEGA"),
    (("dropbox",), "Dropbox"),
    (("hubcdn",), "HubCDN"),
    (("techyboy4u",), "TechyBoy4u"),
)

DEFAULT_SERVER = "Direct Link"

FAST_SERVERS = frozenset({"NetVlyx Server", "VlyJes Server", "Vlyx Server", "Google Drive"})
STREAMING_SERVERS = frozenset({"HDStream4u"})

ALLOWED_DOMAINS: tuple[str, ...] = (
    "techyboy4u.com",
    "taazabull24.com",
    "hubdrive",
    "hubcdn",
    "hdstream4u.com",
    "hubstream.art",
    "hubstream",
    "drive.google",
    "mediafire",
    "mega.nz",
    "dropbox",
    "gdtot",
    "gofile",
    "1fichier",
    "uptobox",
    "rapidgator",
    "nitroflare",
    "turbobit",
    "uploaded.net",
    "zippyshare",
    "sendspace",
    "4shared",
)

_HUBDRIVE_FILE_RE = re.compile(r"/file/([^/?#]+)")
_STREAM_WORDS = ("watch", "stream", "online", "player")
_STREAM_STYLES = ("#00ffff", "#ffcc00", "#08e8de")


def classify(url: str) -> str:
    """Logical server name for *url* (``"Direct Link"`` when unknown)."""
    for needles, server in SERVER_RULES:
        if all(n in url for n in needles):
            return server
    return DEFAULT_SERVER


def speed_for_server(server: str) -> str:
    return "Fast" if server in FAST_SERVERS else "Medium"


def is_placeholder_url(url: str | None) -> bool:
    if not url:
        return True
    stripped = url.strip()
    return stripped in ("", "#") or stripped.startswith("#") or "javascript:" in stripped.lower()


def rewrite_url(url: str) -> str:
    """Map third-party file-viewer URLs onto the internal ``/download/<id>`` route."""
    if "hubdrive" in url and "/file/" in url:
        m = _HUBDRIVE_FILE_RE.search(url)
        if m:
            return f"/download/{m.group(1)}"
    return url


def looks_like_stream(
    label: str = "",
    *,
    style: str = "",
    server: str = "",
    url: str = "",
) -> bool:
    lowered = label.lower()
    if any(word in lowered for word in _STREAM_WORDS):
        return True
    if any(marker in style.lower() for marker in _STREAM_STYLES):
        return True
    if server in STREAMING_SERVERS:
        return True
    return "hubstream.art" in url or "hdstream4u.com" in url


class LinkClassifier:
    """Allow-list validation plus server classification for one template.

    ``extra_domains`` extends the built-in allow-list with hosts a
    template links to (drive pages, cloud mirrors ...).
    """

    def __init__(
        self,
        extra_domains: Iterable[str] = (),
        *,
        rewrite: bool = True,
    ) -> None:
        self._domains: tuple[str, ...] = ALLOWED_DOMAINS + tuple(
            d.lower() for d in extra_domains if d
        )
        self._rewrite = rewrite

    @property
    def allowed_domains(self) -> tuple[str, ...]:
        return self._domains

    def classify(self, url: str) -> str:
        return classify(url)

    def is_valid_download_url(self, url: str | None) -> bool:
        """Reject placeholders and anything outside the allow-list."""
        if is_placeholder_url(url):
            return False
        lowered = str(url).lower()
        return any(domain in lowered for domain in self._domains)

    def build_link(
        self,
        label: str,
        url: str | None,
        *,
        season: str | None = None,
        style: str = "",
        quality: str | None = None,
        streaming: bool | None = None,
    ) -> DownloadLink | None:
        """Create a :class:`DownloadLink` or ``None`` if the URL is rejected."""
        if not self.is_valid_download_url(url):
            log.debug("link_rejected", url=url, label=label)
            return None
        raw = str(url).strip()
        server = classify(raw)
        if streaming is None:
            streaming = looks_like_stream(label, style=style, server=server, url=raw)
        return DownloadLink(
            label=label or "Download",
            url=rewrite_url(raw) if self._rewrite else raw,
            server=server,
            season=season,
            is_streaming=streaming,
            status=LinkStatus.STREAM if streaming else LinkStatus.ACTIVE,
            speed=speed_for_server(server),
            quality=quality,
            style=style or None,
        )


def remove_batch_duplicates(
    groups: Sequence[DownloadGroup],
    episodes: Sequence[EpisodeRecord],
) -> list[DownloadGroup]:
    """Remove group links already present at episode level.

    Variants and groups left without links are dropped.
    """
    episode_urls = {link.url for ep in episodes for link in ep.download_links}
    if not episode_urls:
        return list(groups)

    out: list[DownloadGroup] = []
    removed = 0
    for group in groups:
        variants = []
        for variant in group.quality_variants:
            kept = [link for link in variant.links if link.url not in episode_urls]
            removed += len(variant.links) - len(kept)
            if kept:
                variant.links = kept
                variants.append(variant)
        if variants:
            group.quality_variants = variants
            out.append(group)
    if removed:
        log.debug("batch_duplicates_removed", count=removed)
    return out
