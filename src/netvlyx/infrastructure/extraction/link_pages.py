"""Parser for intermediate link pages (heading + button block per episode or quality)."""

from __future__ import annotations

import re

import structlog
from bs4 import BeautifulSoup, Tag

from netvlyx.domain.entities import LinkButton, LinkPageRecord, LinkSection
from netvlyx.domain.templates import LinkPageRules
from netvlyx.infrastructure.extraction.links import is_placeholder_url
from netvlyx.infrastructure.html.selectors import attr, element_text, matches, next_tags

log = structlog.get_logger(__name__)

# "-:Episodes: 1:-", "Episodes: 2:", "Episode 3"
SECTION_EPISODE_RE = re.compile(r"-?:?Episodes?:?\s*(\d+)\s*:-?", re.IGNORECASE)
# "480p [2.6GB]", "Season 4 720p HEVC", "1080p 4K"
SECTION_QUALITY_RE = re.compile(r"(\d+p(?:\s+(?:HEVC|4K|HDR|10bit))?)", re.IGNORECASE)


def section_episode_number(title: str) -> int | None:
    m = SECTION_EPISODE_RE.search(title)
    return int(m.group(1)) if m else None


def section_quality(title: str) -> str | None:
    m = SECTION_QUALITY_RE.search(title)
    return m.group(1).strip() if m else None


class LinkPageParser:
    """Turn a link page into a :class:`LinkPageRecord`.

    Only a button block immediately following its heading belongs to it;
    headings without one are skipped.
    """

    def __init__(self, rules: LinkPageRules) -> None:
        self._rules = rules

    def parse(self, doc: BeautifulSoup) -> LinkPageRecord:
        record = LinkPageRecord()
        for heading in doc.select(self._rules.heading_selector):
            block = next(next_tags(heading), None)
            if block is None or not matches(block, self._rules.buttons_selector):
                continue
            links = [b for b in map(self._button, block.select("a[href]")) if b]
            if not links:
                continue
            title = element_text(heading)
            record.sections.append(
                LinkSection(
                    title=title,
                    links=links,
                    episode_number=section_episode_number(title),
                    quality=section_quality(title),
                )
            )
        log.debug(
            "link_page_parsed",
            sections=len(record.sections),
            kind=record.kind,
        )
        return record

    def _button(self, anchor: Tag) -> LinkButton | None:
        url = attr(anchor, "href")
        if is_placeholder_url(url):
            return None
        name = element_text(anchor)
        lowered = name.lower()
        rules = self._rules
        return LinkButton(
            name=name,
            url=url,
            is_vcloud=any(m in url for m in rules.vcloud_url_markers)
            or any(m in lowered for m in rules.vcloud_name_markers),
            is_hubcloud=any(m in url for m in rules.hubcloud_url_markers)
            or any(m in lowered for m in rules.hubcloud_name_markers),
        )
