"""Per-episode link extraction for series pages."""

from __future__ import annotations

import re

import structlog
from bs4 import BeautifulSoup, Tag

from netvlyx.domain.entities import DownloadLink, EpisodeRecord
from netvlyx.domain.templates import EpisodeRules
from netvlyx.infrastructure.extraction.links import LinkClassifier
from netvlyx.infrastructure.extraction.quality import page_quality
from netvlyx.infrastructure.html.selectors import (
    attr,
    element_text,
    is_tag,
    next_tags,
    page_text,
)

log = structlog.get_logger(__name__)

# Marker inside a dedicated "single episode links" section: ``E01 - ...``.
SECTION_EPISODE_RE = re.compile(r"E(\d+)\s*[\s\-–—:]")

# Generic markers, most specific first.
EPISODE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"EPiSODE[\s:.\-]*(\d+)", re.IGNORECASE),
    re.compile(r"Episode[\s:.\-]*(\d+)", re.IGNORECASE),
    re.compile(r"\bEP[\s:.\-]*(\d+)", re.IGNORECASE),
    re.compile(r"E(\d+)"),
)

_SECTION_HEADERS = ("h2", "h3")
_EPISODE_HOLDERS = ("h2", "h3", "h4", "h5")
_GENERIC_HOLDERS = "h2, h3, h4, h5, p"


def episode_number(text: str) -> int | None:
    """First positive episode number matched by the generic patterns."""
    for pattern in EPISODE_PATTERNS:
        m = pattern.search(text)
        if m:
            number = int(m.group(1))
            return number if number > 0 else None
    return None


class EpisodeParser:
    """Extract :class:`EpisodeRecord` lists from a content scope."""

    def __init__(self, rules: EpisodeRules, classifier: LinkClassifier) -> None:
        self._rules = rules
        self._classifier = classifier

    def parse(self, scope: BeautifulSoup | Tag) -> list[EpisodeRecord]:
        quality = page_quality(page_text(scope))
        episodes: dict[int, EpisodeRecord] = {}

        found_section = self._section_pass(scope, episodes, quality)
        if not found_section or not episodes:
            self._generic_pass(scope, episodes, quality)

        ordered = [episodes[n] for n in sorted(episodes)]
        return [ep for ep in ordered if ep.download_links]

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _section_pass(
        self,
        scope: BeautifulSoup | Tag,
        episodes: dict[int, EpisodeRecord],
        quality: str,
    ) -> bool:
        found = False
        for header in scope.select(", ".join(_SECTION_HEADERS)):
            text = element_text(header).lower()
            if not any(marker in text for marker in self._rules.section_markers):
                continue
            found = True
            walked = 0
            for sibling in next_tags(header):
                if walked >= self._rules.max_section_siblings:
                    break
                walked += 1
                if sibling.name == "h2" and "episode" not in element_text(sibling).lower():
                    break
                holders = (
                    [sibling]
                    if sibling.name in _EPISODE_HOLDERS
                    else sibling.select(", ".join(_EPISODE_HOLDERS))
                )
                for holder in holders:
                    m = SECTION_EPISODE_RE.search(element_text(holder))
                    if not m or int(m.group(1)) < 1:
                        continue
                    self._merge(episodes, int(m.group(1)), holder.select("a[href]"), quality)
        if found:
            log.debug("episode_section_found", episodes=len(episodes))
        return found

    def _generic_pass(
        self,
        scope: BeautifulSoup | Tag,
        episodes: dict[int, EpisodeRecord],
        quality: str,
    ) -> None:
        for holder in scope.select(_GENERIC_HOLDERS):
            number = episode_number(element_text(holder))
            if number is None:
                continue
            anchors = list(holder.select("a[href]"))
            if is_tag(holder, "a"):
                anchors.append(holder)
            followed = 0
            for sibling in next_tags(holder):
                if followed >= self._rules.follow_siblings:
                    break
                if episode_number(element_text(sibling)) is not None:
                    break
                followed += 1
                if is_tag(sibling, "a") and sibling.get("href"):
                    anchors.append(sibling)
                anchors.extend(sibling.select("a[href]"))
            self._merge(episodes, number, anchors, quality)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _merge(
        self,
        episodes: dict[int, EpisodeRecord],
        number: int,
        anchors: list[Tag],
        quality: str,
    ) -> None:
        links: list[DownloadLink] = []
        for anchor in anchors:
            link = self._link(anchor, quality)
            if link is not None:
                links.append(link)
        if not links:
            return
        record = episodes.get(number)
        if record is None:
            record = EpisodeRecord(episode_number=number)
            episodes[number] = record
        for link in links:
            record.add_link(link)

    def _link(self, anchor: Tag, quality: str) -> DownloadLink | None:
        label = element_text(anchor)
        styles = [attr(anchor, "style")]
        styles.extend(attr(el, "style") for el in anchor.select("[style]"))
        return self._classifier.build_link(
            label or "Download",
            attr(anchor, "href"),
            style=" ".join(s for s in styles if s),
            quality=quality,
        )
