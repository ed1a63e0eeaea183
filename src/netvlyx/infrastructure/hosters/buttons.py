"""Button-link lookup on HubDrive / HubCloud style hoster pages.

These pages hide each next hop behind a labelled button. The target is
read from, in order: the element's ``href``, a URL assigned in its
``onclick`` handler, or the ``href`` of the nearest enclosing link.

Label matching is a substring test, except for the size-suffixed
``Download File [1.2 GB]`` button, matched by pattern.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

import structlog
from bs4 import Tag

from netvlyx.infrastructure.html.selectors import (
    absolute_url,
    attr,
    element_text,
    is_tag,
    parse_html,
)

log = structlog.get_logger(__name__)

BUTTON_SELECTORS: tuple[str, ...] = (
    "button",
    "a",
    '[role="button"]',
    'input[type="button"]',
    'input[type="submit"]',
    ".btn",
    ".button",
)

DOWNLOAD_FILE_BUTTON = "Download File ["
_DOWNLOAD_FILE_RE = re.compile(r"Download\s+File\s+\[[\d.]+\s*[KMGT]?B\]", re.IGNORECASE)

_ONCLICK_URL_RE = re.compile(
    r"(?:window\.open|location\.href|document\.location)\s*[=(]?\s*['\"]([^'\"]+)['\"]"
)

DIRECT_LINK_MARKERS: tuple[str, ...] = ("r2.dev", "hubcdn.fans", "pixel.hubcdn")


def _usable(href: str) -> bool:
    return bool(href) and href != "#" and not href.lower().startswith("javascript:")


def _label(element: Tag) -> str:
    if is_tag(element, "input"):
        return attr(element, "value")
    return element_text(element)


def label_matches(text: str, button: str) -> bool:
    if button == DOWNLOAD_FILE_BUTTON:
        return bool(_DOWNLOAD_FILE_RE.search(text))
    return button in text


def element_target(element: Tag) -> str | None:
    """Raw target of a button element (unresolved), or None."""
    href = attr(element, "href")
    if _usable(href):
        return href

    m = _ONCLICK_URL_RE.search(attr(element, "onclick"))
    if m:
        return m.group(1)

    for parent in element.parents:
        if parent.name in ("body", "html", "[document]"):
            break
        parent_href = attr(parent, "href")
        if _usable(parent_href):
            return parent_href
    return None


class ButtonLinkFinder:
    """:class:`HosterPagePort` implementation over BeautifulSoup."""

    def __init__(self, direct_markers: Sequence[str] = DIRECT_LINK_MARKERS) -> None:
        self._direct_markers = tuple(direct_markers)

    def button_link(self, html: str, button: str, base_url: str) -> str | None:
        doc = parse_html(html)
        for selector in BUTTON_SELECTORS:
            for element in doc.select(selector):
                if not label_matches(_label(element), button):
                    continue
                target = element_target(element)
                if target:
                    url = absolute_url(target, base_url)
                    log.debug("button_link_found", button=button, url=url)
                    return url
        return None

    def direct_link(self, html: str) -> str | None:
        doc = parse_html(html)
        for anchor in doc.select("a[href]"):
            href = attr(anchor, "href")
            if any(marker in href for marker in self._direct_markers):
                return href
        return None
