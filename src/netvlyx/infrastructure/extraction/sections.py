"""Quality-headed download section parser.

Walks the content scope in document order and groups every download
control under its quality heading and season. Passes, in order:

1. heading pass: quality headings and the links up to the next
   heading/separator;
2. button pass: every download button, resolved to its enclosing anchor
   and nearest preceding heading;
3. anchor pass: anchors whose URL carries a template host marker;
4. flat fallback: one "Downloads" group keyed only by quality + size,
   used when the passes above found nothing.

A URL is attached at most once across all groups.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from bs4 import BeautifulSoup, Tag

from netvlyx.domain.entities import DownloadGroup, DownloadLink
from netvlyx.domain.templates import SectionRules
from netvlyx.infrastructure.extraction.links import LinkClassifier, looks_like_stream
from netvlyx.infrastructure.extraction.quality import (
    UNKNOWN,
    QualityMatch,
    is_quality_heading,
    parse_quality_heading,
    quality_from_text,
    should_ignore,
    size_from_text,
)
from netvlyx.infrastructure.extraction.season import extract_season, mentions_season
from netvlyx.infrastructure.html.selectors import (
    attr,
    closest,
    element_text,
    is_tag,
    matches,
    next_until,
    previous_elements,
)

log = structlog.get_logger(__name__)

FLAT_GROUP_TITLE = "Downloads"
_HEADING_NAMES = ("h1", "h2", "h3", "h4", "h5", "h6")


def group_title(heading_text: str, season: str | None) -> str:
    """``"Season 2 - 720p [1GB]"`` unless the heading already names a season."""
    if season and not mentions_season(heading_text):
        return f"Season {season} - {heading_text}"
    return heading_text


class GroupCollector:
    """Ordered ``(title, season)`` -> group map with global URL dedup."""

    def __init__(self) -> None:
        self._groups: dict[tuple[str, str | None], DownloadGroup] = {}
        self._seen: set[str] = set()

    def __len__(self) -> int:
        return len(self._groups)

    def seen(self, url: str) -> bool:
        return url in self._seen

    def add(
        self,
        title: str,
        season: str | None,
        match: QualityMatch,
        links: Iterable[DownloadLink],
    ) -> int:
        fresh = [link for link in links if link.url not in self._seen]
        if not fresh:
            return 0
        key = (title, season)
        group = self._groups.get(key)
        if group is None:
            group = DownloadGroup(title=title, season=season)
            self._groups[key] = group
        variant = group.variant(match.quality, match.size, match.codec)
        added = 0
        for link in fresh:
            if variant.add_link(link):
                self._seen.add(link.url)
                added += 1
        return added

    def groups(self) -> list[DownloadGroup]:
        return [g for g in self._groups.values() if g.quality_variants and g.link_count]


class SectionParser:
    """Extract :class:`DownloadGroup` objects from a content scope.

    Stateless between calls: the same document always yields the same
    groups.
    """

    def __init__(self, rules: SectionRules, classifier: LinkClassifier) -> None:
        self._rules = rules
        self._classifier = classifier

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, scope: BeautifulSoup | Tag) -> list[DownloadGroup]:
        collector = GroupCollector()
        season_memo: dict[int, str | None] = {}

        self._heading_pass(scope, collector, season_memo)
        if self._rules.button_selector:
            self._button_pass(scope, collector, season_memo)
        if self._rules.anchor_markers:
            self._anchor_pass(scope, collector, season_memo)

        groups = collector.groups()
        if not groups and self._rules.fallback_flat:
            groups = self._flat_pass(scope)
            if groups:
                log.debug("sections_flat_fallback", groups=len(groups))
        return groups

    def resolve_season(
        self,
        heading: Tag,
        heading_text: str | None = None,
        memo: dict[int, str | None] | None = None,
    ) -> str | None:
        """Season for *heading*: in-heading hint first, then backward search."""
        memo = {} if memo is None else memo
        key = id(heading)
        if key in memo:
            return memo[key]
        text = heading_text if heading_text is not None else element_text(heading)
        season = extract_season(text)
        if season is None:
            season = self.search_backward(heading, memo)
        memo[key] = season
        return season

    def search_backward(
        self,
        element: Tag,
        memo: dict[int, str | None] | None = None,
    ) -> str | None:
        """Bounded reverse-document-order walk for a season hint.

        Stops at the hop limit or at another quality heading; in the latter
        case that heading's own season (if any) is inherited, since no
        season boundary lies between the two.
        """
        memo = {} if memo is None else memo
        for prev in previous_elements(element, limit=self._rules.backward_hops):
            if prev.name == "hr":
                before = previous_elements(prev, limit=1)
                if before and _is_season_marker(before[0]):
                    return extract_season(element_text(before[0]))
                continue
            text = element_text(prev)
            if not text:
                continue
            if self._is_quality_heading_el(prev, text):
                return memo[id(prev)] if id(prev) in memo else extract_season(text)
            if _is_season_marker(prev, text):
                return extract_season(text)
        return None

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _heading_pass(
        self,
        scope: BeautifulSoup | Tag,
        collector: GroupCollector,
        memo: dict[int, str | None],
    ) -> None:
        for heading in scope.select(self._rules.heading_selector):
            text = element_text(heading)
            if not text or should_ignore(text):
                continue
            match = parse_quality_heading(text)
            if match is None:
                if not looks_like_stream(text):
                    continue
                match = QualityMatch(quality=UNKNOWN)
                season = None
                streaming = True
            else:
                season = self.resolve_season(heading, text, memo)
                streaming = None
            links = self._links_after(heading, season, match, streaming=streaming)
            if links:
                collector.add(group_title(text, season), season, match, links)

    def _button_pass(
        self,
        scope: BeautifulSoup | Tag,
        collector: GroupCollector,
        memo: dict[int, str | None],
    ) -> None:
        for button in scope.select(self._rules.button_selector or "button"):
            anchor = button if is_tag(button, "a") else closest(button, "a[href]")
            if anchor is None:
                continue
            self._attach_orphan(scope, anchor, collector, memo)

    def _anchor_pass(
        self,
        scope: BeautifulSoup | Tag,
        collector: GroupCollector,
        memo: dict[int, str | None],
    ) -> None:
        for anchor in scope.select("a[href]"):
            href = attr(anchor, "href")
            if any(marker in href for marker in self._rules.anchor_markers):
                self._attach_orphan(scope, anchor, collector, memo)

    def _flat_pass(self, scope: BeautifulSoup | Tag) -> list[DownloadGroup]:
        collector = GroupCollector()
        anchors: list[Tag] = []
        if self._rules.button_selector:
            for button in scope.select(self._rules.button_selector):
                anchor = button if is_tag(button, "a") else closest(button, "a[href]")
                if anchor is not None:
                    anchors.append(anchor)
        anchors.extend(scope.select("a[href]"))

        for anchor in anchors:
            heading = self._preceding_heading(anchor)
            context = element_text(heading) if heading is not None else ""
            label = self._label_for(anchor)
            match = parse_quality_heading(context) if context else None
            if match is None:
                match = QualityMatch(
                    quality=quality_from_text(label),
                    size=size_from_text(label) or UNKNOWN,
                )
            link = self._make_link(anchor, None, match)
            if link is not None:
                collector.add(FLAT_GROUP_TITLE, None, match, [link])
        return collector.groups()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _attach_orphan(
        self,
        scope: BeautifulSoup | Tag,
        anchor: Tag,
        collector: GroupCollector,
        memo: dict[int, str | None],
    ) -> None:
        """Attach a control that is not a direct sibling of its heading."""
        url = attr(anchor, "href")
        if not url or collector.seen(url):
            return
        block = closest(anchor, "p, div, center") or anchor
        if block is scope:
            block = anchor
        heading = self._preceding_heading(block)
        if heading is not None:
            text = element_text(heading)
            match = parse_quality_heading(text)
        else:
            text, match = "", None

        if heading is not None and match is not None:
            season = self.resolve_season(heading, text, memo)
            title = group_title(text, season)
        else:
            label = self._label_for(anchor)
            match = QualityMatch(
                quality=quality_from_text(label),
                size=size_from_text(label) or UNKNOWN,
            )
            season = self.search_backward(block, memo)
            title = group_title(text or FLAT_GROUP_TITLE, season)

        link = self._make_link(anchor, season, match)
        if link is not None:
            collector.add(title, season, match, [link])

    def _preceding_heading(self, element: Tag) -> Tag | None:
        """Nearest preceding sibling heading, else nearest quality heading before it."""
        for prev in element.previous_siblings:
            if is_tag(prev) and matches(prev, self._rules.heading_selector):
                return prev
        for prev in element.find_all_previous(_HEADING_NAMES):
            if matches(prev, self._rules.heading_selector) and is_quality_heading(
                element_text(prev)
            ):
                return prev
        return None

    def _is_quality_heading_el(self, element: Tag, text: str) -> bool:
        return matches(element, self._rules.heading_selector) and is_quality_heading(text)

    def _links_after(
        self,
        heading: Tag,
        season: str | None,
        match: QualityMatch,
        *,
        streaming: bool | None = None,
    ) -> list[DownloadLink]:
        anchors: list[Tag] = list(heading.select("a[href]"))
        for block in next_until(heading, self._rules.stop_selector):
            if is_tag(block, "a") and block.get("href"):
                anchors.append(block)
            else:
                anchors.extend(block.select("a[href]"))

        links: list[DownloadLink] = []
        for anchor in anchors:
            link = self._make_link(anchor, season, match, streaming=streaming)
            if link is not None and all(link.url != other.url for other in links):
                links.append(link)
        return links

    def _label_for(self, anchor: Tag) -> str:
        for rule in self._rules.link_labels:
            if matches(anchor, rule.selector):
                return rule.label
        text = element_text(anchor)
        if not text:
            button = anchor.find("button")
            text = element_text(button) if button is not None else ""
        return text or "Download"

    def _make_link(
        self,
        anchor: Tag,
        season: str | None,
        match: QualityMatch,
        *,
        streaming: bool | None = None,
    ) -> DownloadLink | None:
        button = anchor.find("button")
        style = (attr(button, "style") if button is not None else "") or attr(anchor, "style")
        return self._classifier.build_link(
            self._label_for(anchor),
            attr(anchor, "href"),
            season=season,
            style=style,
            quality=match.quality,
            streaming=streaming,
        )


def _is_season_marker(element: Tag, text: str | None = None) -> bool:
    """A non-quality element announcing a season (``Download Season 2``)."""
    text = element_text(element) if text is None else text
    lowered = text.lower()
    if "season" not in lowered or extract_season(text) is None:
        return False
    return element.name in _HEADING_NAMES or "download" in lowered
