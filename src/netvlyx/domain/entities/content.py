"""Domain entities for extracted content pages.

Plain dataclasses, no framework dependencies, no I/O. Built fresh for
every extraction call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal


class LinkStatus(str, Enum):
    """Display status of a download link."""

    ACTIVE = "Active"
    STREAM = "Stream"
    UNKNOWN = "Unknown"


@dataclass
class DownloadLink:
    """A single download or stream button resolved from the source page."""

    label: str
    url: str
    server: str = "Direct Link"
    season: str | None = None
    is_streaming: bool = False
    status: LinkStatus = LinkStatus.ACTIVE
    speed: str = "Medium"
    quality: str | None = None
    style: str | None = None


@dataclass
class QualityVariant:
    """One resolution/encoding tier inside a download group."""

    quality: str
    size: str = "Unknown"
    links: list[DownloadLink] = field(default_factory=list)
    codec: str | None = None

    def add_link(self, link: DownloadLink) -> bool:
        """Append ``link`` unless its URL is already present."""
        if any(existing.url == link.url for existing in self.links):
            return False
        self.links.append(link)
        return True


@dataclass
class DownloadGroup:
    """One logical section of the source page (e.g. "Season 2 - 720p")."""

    title: str
    season: str | None = None
    quality_variants: list[QualityVariant] = field(default_factory=list)

    def variant(self, quality: str, size: str, codec: str | None = None) -> QualityVariant:
        """Return the variant for ``(quality, size)``, creating it if needed."""
        for existing in self.quality_variants:
            if existing.quality == quality and existing.size == size:
                return existing
        created = QualityVariant(quality=quality, size=size, codec=codec)
        self.quality_variants.append(created)
        return created

    @property
    def link_count(self) -> int:
        return sum(len(v.links) for v in self.quality_variants)


@dataclass
class EpisodeRecord:
    """Per-episode download links for series pages."""

    episode_number: int
    title: str = ""
    description: str = ""
    duration: str = "45 min"
    download_links: list[DownloadLink] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.episode_number < 1:
            raise ValueError("episode_number must be a positive integer")
        if not self.title:
            self.title = f"Episode {self.episode_number}"
        if not self.description:
            self.description = f"Episode {self.episode_number} of the series"

    def add_link(self, link: DownloadLink) -> bool:
        if any(existing.url == link.url for existing in self.download_links):
            return False
        self.download_links.append(link)
        return True


@dataclass(frozen=True)
class Trailer:
    """YouTube trailer found on the page."""

    video_id: str
    embed_url: str
    thumbnail: str


@dataclass
class ContentMetadata:
    """Label-derived metadata (``Language: Hindi``, ``Size: 1.2GB`` ...)."""

    movie_name: str | None = None
    series_name: str | None = None
    season: str | None = None
    episode: str | None = None
    language: str | None = None
    release_year: str | None = None
    quality: str | None = None
    size: str | None = None
    format: str | None = None
    subtitle: str | None = None


@dataclass
class ContentRecord:
    """Normalized result of parsing one content page."""

    title: str
    poster_url: str | None = None
    external_rating: str | None = None
    external_rating_link: str | None = None
    metadata: ContentMetadata = field(default_factory=ContentMetadata)
    synopsis: str = ""
    images: list[str] = field(default_factory=list)
    has_trusted_images: bool = False
    download_groups: list[DownloadGroup] = field(default_factory=list)
    episodes: list[EpisodeRecord] = field(default_factory=list)
    trailer: Trailer | None = None
    watch_online_url: str | None = None

    @property
    def link_count(self) -> int:
        groups = sum(g.link_count for g in self.download_groups)
        return groups + sum(len(e.download_links) for e in self.episodes)


# ---------------------------------------------------------------------------
# Drive pages (intermediate hoster-button pages)
# ---------------------------------------------------------------------------

DriveKind = Literal["episode", "movie"]


@dataclass(frozen=True)
class DriveServer:
    """A hoster button on a drive page."""

    name: str
    url: str
    style: str = ""


@dataclass
class DriveEpisode:
    episode_number: int
    servers: list[DriveServer] = field(default_factory=list)


@dataclass
class DriveRecord:
    """Result for drive pages: either per-episode servers or a movie server list."""

    title: str
    kind: DriveKind = "movie"
    episodes: list[DriveEpisode] = field(default_factory=list)
    servers: list[DriveServer] = field(default_factory=list)
    alternatives: list[DriveServer] = field(default_factory=list)

    @property
    def link_count(self) -> int:
        if self.kind == "episode":
            return sum(len(e.servers) for e in self.episodes)
        return len(self.servers) + len(self.alternatives)
