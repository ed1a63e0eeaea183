"""Pure domain models for source templates (framework-free).

A template describes one family of source pages as data: which
selectors locate title, poster and screenshots, which label vocabulary
feeds the metadata table, how download sections are laid out and how
the fetch layer should treat the host. The extraction engine is shared
by every template.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

TemplateFamily = Literal["page", "drive", "links", "vlyx"]
ExternalPlacement = Literal["fallback", "first", "only", "never"]

METADATA_FIELDS: tuple[str, ...] = (
    "movie_name",
    "series_name",
    "season",
    "episode",
    "language",
    "release_year",
    "quality",
    "size",
    "format",
    "subtitle",
)


@dataclass(frozen=True)
class LabelRule:
    """``{label}:\\s*value`` maps to ``ContentMetadata.<field>``."""

    label: str
    field: str


@dataclass(frozen=True)
class LinkLabelRule:
    """Fixed display label for anchors matching ``selector``."""

    selector: str
    label: str


@dataclass(frozen=True)
class FetchRules:
    external: ExternalPlacement = "fallback"
    external_first_hosts: tuple[str, ...] = ()
    min_html_length: int = 0
    trailing_slash: bool = False


@dataclass(frozen=True)
class ScreenshotRules:
    selectors: tuple[str, ...] = ()
    trusted_hosts: tuple[str, ...] = ("blogger.googleusercontent.com",)
    other_markers: tuple[str, ...] = ()
    exclude_markers: tuple[str, ...] = ()
    scan_synopsis_block: bool = False
    # When True every image found by ``selectors`` is kept, no bucketing.
    keep_all: bool = False


@dataclass(frozen=True)
class FieldRules:
    content_scope: tuple[str, ...] = ()
    title: tuple[str, ...] = ("h1.entry-title", ".entry-title", "h1")
    poster: tuple[str, ...] = ()
    poster_exclude: tuple[str, ...] = ()
    labels: tuple[LabelRule, ...] = ()
    synopsis_markers: tuple[str, ...] = ()
    synopsis_stops: tuple[str, ...] = ()
    screenshots: ScreenshotRules = field(default_factory=ScreenshotRules)
    watch_online: tuple[str, ...] = ()


@dataclass(frozen=True)
class SectionRules:
    """Layout of quality-headed download sections."""

    heading_selector: str = "h3, h4, h5"
    stop_selector: str = "h3, h4, h5, hr"
    backward_hops: int = 10
    button_selector: str | None = None
    anchor_markers: tuple[str, ...] = ()
    link_labels: tuple[LinkLabelRule, ...] = ()
    fallback_flat: bool = True


@dataclass(frozen=True)
class EpisodeRules:
    enabled: bool = False
    section_markers: tuple[str, ...] = (
        "single episode",
        "episode links",
        "episode wise",
    )
    max_section_siblings: int = 20
    follow_siblings: int = 3


@dataclass(frozen=True)
class DriveRules:
    """Selectors for intermediate drive pages (per-episode hoster buttons)."""

    episode_heading: str = "h4"
    sibling_window: int = 5
    content_links: tuple[str, ...] = (
        ".entry a[href]",
        ".entry-inner a[href]",
        ".post-inner a[href]",
    )
    alternative_links: tuple[str, ...] = (".su-box-content a", ".alert a")


@dataclass(frozen=True)
class LinkPageRules:
    """Layout of intermediate link pages: a heading, then a block of buttons.

    A link counts as V-Cloud (or HubCloud) when its URL contains one of
    the ``*_url_markers`` or its lowercased label one of the
    ``*_name_markers``.
    """

    heading_selector: str = "div.download-links-div h4, div.download-links-div h5"
    buttons_selector: str = "div.downloads-btns-div"
    vcloud_url_markers: tuple[str, ...] = ("vcloud.", "gdlink.dev")
    vcloud_name_markers: tuple[str, ...] = ("vcloud", "gdflix")
    hubcloud_url_markers: tuple[str, ...] = ("hubcloud.", "dgdrive.pro")
    hubcloud_name_markers: tuple[str, ...] = ("hubcloud", "hub-cloud")


@dataclass(frozen=True)
class LinkTypeRule:
    """Hoster type assigned to URLs containing any of ``markers``."""

    name: str
    markers: tuple[str, ...]


@dataclass(frozen=True)
class VlyxRules:
    """Hoster pick pages: per-quality headings or one flat link list.

    ``link_types`` is in preference order; the first type present on a
    heading (or page) becomes its preferred link.
    """

    quality_heading: str = "h3, h5"
    link_types: tuple[LinkTypeRule, ...] = (
        LinkTypeRule("hubdrive", ("hubdrive.",)),
        LinkTypeRule("hubcdn", ("hubcdn.fans", "hubdcdn.fans")),
        LinkTypeRule("hubcloud", ("hubcloud.",)),
        LinkTypeRule("gofile", ("gofile.io",)),
    )


@dataclass(frozen=True)
class TemplateDefinition:
    """Validated, immutable template."""

    name: str
    version: str
    family: TemplateFamily = "page"
    description: str = ""
    hosts: tuple[str, ...] = ()
    allowed_domains: tuple[str, ...] = ()
    fetch: FetchRules = field(default_factory=FetchRules)
    fields: FieldRules = field(default_factory=FieldRules)
    sections: SectionRules = field(default_factory=SectionRules)
    episodes: EpisodeRules = field(default_factory=EpisodeRules)
    drive: DriveRules = field(default_factory=DriveRules)
    links: LinkPageRules = field(default_factory=LinkPageRules)
    vlyx: VlyxRules = field(default_factory=VlyxRules)

    def matches_host(self, host: str) -> bool:
        host = host.lower()
        return any(pattern in host for pattern in self.hosts)
