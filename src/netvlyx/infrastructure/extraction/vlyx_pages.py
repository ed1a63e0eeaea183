"""Parser for hoster pick pages: the same file on several hosters, one preferred."""

from __future__ import annotations

import re
from collections.abc import Iterable

import structlog
from bs4 import BeautifulSoup, Tag

from netvlyx.domain.entities import HosterChoice, VlyxRecord
from netvlyx.domain.templates import VlyxRules
from netvlyx.infrastructure.html.selectors import attr, element_text

log = structlog.get_logger(__name__)

_HAS_QUALITY_RE = re.compile(r"\d+p", re.IGNORECASE)
CHOICE_QUALITY_RE = re.compile(r"(\d+p(?:\s+10Bit\s+HEVC)?)", re.IGNORECASE)
SINGLE_QUALITY = "Single Quality"


def is_quality_heading(text: str) -> bool:
    """``"720p – [1.2GB]"``: a quality token plus a dash separator."""
    return bool(_HAS_QUALITY_RE.search(text)) and ("–" in text or "-" in text)


class VlyxPageParser:
    """Turn a hoster pick page into a :class:`VlyxRecord`."""

    def __init__(self, rules: VlyxRules) -> None:
        self._rules = rules

    def link_type(self, url: str) -> str | None:
        for rule in self._rules.link_types:
            if any(marker in url for marker in rule.markers):
                return rule.name
        return None

    def choice(self, quality: str, anchors: Iterable[Tag]) -> HosterChoice | None:
        """First URL per hoster type; ``None`` when no known hoster is linked."""
        found: dict[str, str] = {}
        for anchor in anchors:
            url = attr(anchor, "href")
            kind = self.link_type(url) if url else None
            if kind is not None:
                found.setdefault(kind, url)
        if not found:
            return None
        ordered = {r.name: found[r.name] for r in self._rules.link_types if r.name in found}
        return HosterChoice(quality=quality, links=ordered, link_type=next(iter(ordered)))

    def parse(self, doc: BeautifulSoup, original_url: str) -> VlyxRecord:
        choices: list[HosterChoice] = []
        for heading in doc.select(self._rules.quality_heading):
            text = element_text(heading)
            if not is_quality_heading(text):
                continue
            m = CHOICE_QUALITY_RE.search(text)
            if m is None:
                continue
            choice = self.choice(m.group(1).strip(), heading.select("a[href]"))
            if choice is not None:
                choices.append(choice)

        if choices:
            return VlyxRecord(
                original_url=original_url, kind="quality_selection", choices=choices
            )

        single = self.choice(SINGLE_QUALITY, doc.select("a[href]"))
        if single is not None:
            return VlyxRecord(original_url=original_url, kind="single", choices=[single])

        log.debug("vlyx_page_no_hosters", url=original_url)
        return VlyxRecord(original_url=original_url)
