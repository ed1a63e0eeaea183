"""CSS-selector-based HTML querying with fallback chains.

Every lookup accepts a primary selector and optional *fallback_selectors*;
the first selector that yields at least one match wins. On top of that
this module exposes the structural traversal primitives the parsers rely
on (``next_until``, ``previous_elements``, ``closest``), all of which
skip bare text nodes and only ever yield :class:`bs4.Tag` objects.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

_WS_RE = re.compile(r"\s+")


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def collapse_ws(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS with a fallback chain.

    Returns results from the **first** selector that matches at least one
    element.
    """
    for sel in (selector, *fallback_selectors):
        if not sel:
            continue
        items = root.select(sel)
        if items:
            return items
    return []


def select_first(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> Tag | None:
    items = select_items(root, selector, *fallback_selectors)
    return items[0] if items else None


def element_text(element: Tag | None) -> str:
    """Whitespace-collapsed text content of *element* ('' for None)."""
    if element is None:
        return ""
    return collapse_ws(element.get_text(" "))


def extract_text(
    element: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Text of the first matching element that has non-empty text.

    With ``selector=""`` the element's own text is returned.
    """
    if selector == "":
        return element_text(element) or default

    for sel in (selector, *fallback_selectors):
        for match in element.select(sel):
            text = element_text(match)
            if text:
                return text
    return default


def extract_attr(
    element: BeautifulSoup | Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """An attribute of the first matching element that carries it.

    With ``selector=""`` the attribute is read from *element* itself.
    """
    if selector == "":
        val = element.get(attr)
        return str(val) if val else default

    for sel in (selector, *fallback_selectors):
        for match in element.select(sel):
            val = match.get(attr)
            if val:
                return str(val)
    return default


def attr(element: Tag, name: str) -> str:
    """Attribute value as a stripped string ('' when absent)."""
    val = element.get(name)
    if val is None:
        return ""
    if isinstance(val, list):
        return " ".join(val).strip()
    return str(val).strip()


def absolute_url(href: str, base_url: str = "") -> str:
    """Normalize protocol-relative URLs and resolve relative ones."""
    href = href.strip()
    if href.startswith("//"):
        return "https:" + href
    if base_url and not href.startswith(("http://", "https://")):
        return urljoin(base_url, href)
    return href


def is_tag(element: object, *names: str) -> bool:
    return isinstance(element, Tag) and (not names or element.name in names)


def matches(element: Tag, selector: str) -> bool:
    """True when *element* itself matches the CSS *selector*."""
    return bool(element.css.match(selector))


def closest(element: Tag, selector: str) -> Tag | None:
    """Nearest ancestor-or-self matching *selector*."""
    return element.css.closest(selector)


def next_tags(element: Tag) -> Iterator[Tag]:
    """Following element siblings in document order."""
    for sibling in element.next_siblings:
        if isinstance(sibling, Tag):
            yield sibling


def next_until(element: Tag, stop_selector: str) -> list[Tag]:
    """Following element siblings up to (excluding) the first match of *stop_selector*."""
    out: list[Tag] = []
    for sibling in next_tags(element):
        if matches(sibling, stop_selector):
            break
        out.append(sibling)
    return out


def previous_elements(element: Tag, limit: int | None = None) -> list[Tag]:
    """Preceding element siblings in strict reverse document order."""
    out: list[Tag] = []
    for sibling in element.previous_siblings:
        if not isinstance(sibling, Tag):
            continue
        out.append(sibling)
        if limit is not None and len(out) >= limit:
            break
    return out


def page_text(root: BeautifulSoup | Tag) -> str:
    """Text of *root* with one line per text node.

    Label regexes such as ``Language:\\s*([^\\n\\r]+)`` rely on
    line boundaries between block elements.
    """
    lines = (line.strip() for line in root.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)
