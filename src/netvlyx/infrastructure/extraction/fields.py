"""Scalar field extractors.

Every extractor returns ``None`` (or an empty value) when nothing matches;
none of them raise for missing markup.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from bs4 import BeautifulSoup, Tag

from netvlyx.domain.entities import ContentMetadata, ContentRecord, Trailer
from netvlyx.domain.templates import FieldRules, LabelRule, ScreenshotRules
from netvlyx.infrastructure.html.selectors import (
    absolute_url,
    attr,
    collapse_ws,
    element_text,
    extract_text,
    page_text,
    select_items,
)

DEFAULT_TITLE = "Unknown Title"

_RATING_RE = re.compile(r"(\d+\.?\d*\s*/\s*10)")
_YOUTUBE_RE = re.compile(
    r"(?:https?:)?//(?:www\.)?(?:youtube\.com/(?:watch\?v=|embed/)|youtu\.be/)"
    r"([A-Za-z0-9_-]{11})"
)


def content_scope(doc: BeautifulSoup, rules: FieldRules) -> BeautifulSoup | Tag:
    """First content container named by the template, else the body."""
    for selector in rules.content_scope:
        found = doc.select_one(selector)
        if found is not None:
            return found
    return doc.body or doc


def image_src(img: Tag) -> str:
    """Real image URL of *img*, skipping base64 lazy-load placeholders."""
    src = attr(img, "src")
    if src and not src.startswith("data:"):
        return absolute_url(src)
    for name in ("data-src", "data-lazy-src"):
        candidate = attr(img, name)
        if candidate and not candidate.startswith("data:"):
            return absolute_url(candidate)
    srcset = attr(img, "srcset") or attr(img, "data-srcset")
    if srcset:
        first = srcset.split(",")[0].strip().split(" ")[0]
        if first and not first.startswith("data:"):
            return absolute_url(first)
    return ""


def extract_title(doc: BeautifulSoup, rules: FieldRules) -> str:
    if not rules.title:
        return DEFAULT_TITLE
    return extract_text(doc, *rules.title, default=DEFAULT_TITLE)


def extract_poster(doc: BeautifulSoup, rules: FieldRules) -> str | None:
    """First image from the poster selector list that is not a screenshot."""
    for selector in rules.poster:
        for img in doc.select(selector):
            src = image_src(img)
            if not src:
                continue
            if any(marker in src for marker in rules.poster_exclude):
                break
            return src
    return None


def extract_rating(doc: BeautifulSoup) -> tuple[str | None, str | None]:
    """``(rating, link)`` from the first IMDb anchor on the page."""
    anchor = doc.select_one('a[href*="imdb.com"]')
    if anchor is None:
        return None, None
    link = attr(anchor, "href") or None
    m = _RATING_RE.search(element_text(anchor)) or _RATING_RE.search(page_text(doc))
    rating = m.group(1).replace(" ", "") if m else None
    return rating, link


def extract_metadata(text: str, labels: Sequence[LabelRule]) -> ContentMetadata:
    """Apply the template's label table to the flattened page text."""
    values: dict[str, str] = {}
    for rule in labels:
        if rule.field in values:
            continue
        m = re.search(rf"{rule.label}:\s*([^\n\r]+)", text)
        if m:
            value = m.group(1).strip()
            if value:
                values[rule.field] = value
    return ContentMetadata(**values)


def extract_synopsis(
    text: str,
    markers: Sequence[str],
    stops: Sequence[str],
) -> str:
    """Text between a synopsis label and the next section label."""
    if not markers:
        return ""
    start = "|".join(re.escape(m) for m in markers)
    stop = "|".join(re.escape(s) for s in stops)
    lookahead = f"(?={stop}|$)" if stop else "$"
    m = re.search(rf"(?:{start})\s*([\s\S]+?){lookahead}", text, re.IGNORECASE)
    if not m:
        return ""
    return collapse_ws(m.group(1))


def _synopsis_block_images(scope: BeautifulSoup | Tag) -> list[Tag]:
    """Images between a SYNOPSIS heading and the next heading/separator."""
    images: list[Tag] = []
    for heading in scope.select("h3"):
        if "synopsis" not in element_text(heading).lower():
            continue
        for sibling in heading.find_next_siblings():
            if sibling.name in ("h3", "h4", "h5", "hr"):
                break
            if sibling.name == "img":
                images.append(sibling)
            images.extend(sibling.select("img"))
    return images


def extract_screenshots(
    doc: BeautifulSoup,
    scope: BeautifulSoup | Tag,
    rules: ScreenshotRules,
    poster: str | None,
) -> tuple[list[str], bool]:
    """Return ``(images, has_trusted_images)``.

    Trusted-host images win wholesale; otherwise images whose URL carries
    one of the "other" markers are used. The poster and data URIs are
    always excluded.
    """
    candidates: list[Tag] = []
    for selector in rules.selectors:
        candidates.extend(doc.select(selector))
        if rules.keep_all and candidates:
            break
    if rules.scan_synopsis_block:
        candidates.extend(_synopsis_block_images(scope))

    trusted: list[str] = []
    other: list[str] = []
    for img in candidates:
        src = image_src(img)
        if not src or src == poster or src.startswith("data:"):
            continue
        if any(marker in src for marker in rules.exclude_markers):
            continue
        if rules.keep_all:
            if src not in other:
                other.append(src)
            continue
        if any(host in src for host in rules.trusted_hosts):
            if src not in trusted:
                trusted.append(src)
        elif any(marker in src for marker in rules.other_markers):
            if src not in other:
                other.append(src)

    if trusted:
        return trusted, True
    return other, False


def extract_trailer(doc: BeautifulSoup, html: str | None = None) -> Trailer | None:
    """First YouTube trailer: iframe embed, then trailer anchor, then raw HTML."""
    sources: list[str] = [attr(f, "src") for f in doc.select("iframe[src]")]
    for anchor in doc.select("a[href]"):
        label = element_text(anchor).lower()
        if "trailer" in label or "watch" in label:
            sources.append(attr(anchor, "href"))
    if html:
        sources.append(html)

    for source in sources:
        m = _YOUTUBE_RE.search(source)
        if m:
            video_id = m.group(1)
            return Trailer(
                video_id=video_id,
                embed_url=f"https://www.youtube.com/embed/{video_id}",
                thumbnail=f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg",
            )
    return None


def extract_watch_online(doc: BeautifulSoup, selectors: Sequence[str]) -> str | None:
    for item in select_items(doc, *selectors) if selectors else []:
        href = attr(item, "href")
        if href and not href.startswith("#"):
            return absolute_url(href)
    return None


def extract_fields(doc: BeautifulSoup, rules: FieldRules, html: str | None = None) -> ContentRecord:
    """Build a :class:`ContentRecord` with every scalar field populated."""
    scope = content_scope(doc, rules)
    text = page_text(scope)

    title = extract_title(doc, rules)
    poster = extract_poster(doc, rules)
    rating, rating_link = extract_rating(doc)
    images, trusted = extract_screenshots(doc, scope, rules.screenshots, poster)

    return ContentRecord(
        title=title,
        poster_url=poster,
        external_rating=rating,
        external_rating_link=rating_link,
        metadata=extract_metadata(text, rules.labels),
        synopsis=extract_synopsis(text, rules.synopsis_markers, rules.synopsis_stops),
        images=images,
        has_trusted_images=trusted,
        trailer=extract_trailer(doc, html),
        watch_online_url=extract_watch_online(doc, rules.watch_online),
    )
