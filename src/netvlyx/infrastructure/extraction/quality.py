"""Quality / codec / size recognition for download headings."""

from __future__ import annotations

import re
from dataclasses import dataclass

UNKNOWN = "Unknown"

_CODECS = r"HEVC|x264|x265|WEB-DL|10bit"


@dataclass(frozen=True)
class QualityMatch:
    quality: str
    size: str = UNKNOWN
    codec: str | None = None


# Ordered most specific first. Each entry maps capture groups to
# (quality, codec, size); ``None`` means the pattern has no such group.
_HEADING_PATTERNS: tuple[tuple[re.Pattern[str], int, int | None, int | None], ...] = (
    (re.compile(r"HQ\s+(\d{3,4}p)\s*\[([^\]]+)\]", re.IGNORECASE), 1, None, 2),
    (re.compile(r"(\d{3,4}p)\s*Links?\s*\[([^\]]+)\]", re.IGNORECASE), 1, None, 2),
    (re.compile(r"(\d{3,4}p)\s*⚡\s*\[([^\]]+)\]", re.IGNORECASE), 1, None, 2),
    (re.compile(rf"(\d{{3,4}}p)\s+({_CODECS})\s*\[([^\]]*)\]", re.IGNORECASE), 1, 2, 3),
    (
        re.compile(
            rf"(\d{{3,4}}p)\s*(?:({_CODECS})\s*)?(?<!\[)([0-9.]+\s*[KMGT]?B)\]",
            re.IGNORECASE,
        ),
        1,
        2,
        3,
    ),
    (re.compile(r"(\d{3,4}p)[^\[\]]*?\[([^\]]+)\]", re.IGNORECASE), 1, None, 2),
)

_HQ_RE = re.compile(r"\bHQ\s+(\d{3,4}p)\b", re.IGNORECASE)
_QUALITY_TOKEN_RE = re.compile(r"\b(4K|2160p|1080p|720p|480p|360p)\b", re.IGNORECASE)
_HEADING_QUALITY_RE = re.compile(
    r"\b(?:HQ\s+)?(480p|720p|1080p|2160p|4K)\b", re.IGNORECASE
)
_CODEC_RE = re.compile(rf"\b({_CODECS})\b", re.IGNORECASE)

_SIZE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\[([0-9.]+\s*[KMGT]B)\]", re.IGNORECASE),
    re.compile(r"⚡\s*\[([^\]]+)\]"),
    re.compile(r"(\d+(?:\.\d+)?\s*(?:GB|MB|KB))\]", re.IGNORECASE),
    re.compile(r"\(([0-9.]+\s*[KMGT]B)\)", re.IGNORECASE),
    re.compile(r"\b([0-9.]+\s*[KMGT]B)\b", re.IGNORECASE),
)

_IGNORE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\[SAMPLE\]", re.IGNORECASE),
    re.compile(r"EXTENDED[-\s]CUT", re.IGNORECASE),
    re.compile(r"\bVERSiON\b"),
)


def clean_size(raw: str | None) -> str:
    """Normalize a captured size (``"2.1 GB]"`` -> ``"2.1GB"``).

    A bare number gets ``GB`` below 100 and ``MB`` otherwise.
    """
    if not raw or raw == UNKNOWN:
        return UNKNOWN
    cleaned = re.sub(r"[^\d.KMGTB]", "", raw, flags=re.IGNORECASE).upper()
    if not cleaned or not cleaned[0].isdigit():
        return UNKNOWN
    if not re.search(r"[KMGT]?B$", cleaned):
        try:
            value = float(cleaned.rstrip("KMGT"))
        except ValueError:
            return UNKNOWN
        cleaned = cleaned.rstrip("KMGT") + ("GB" if value < 100 else "MB")
    return cleaned


def normalize_quality(token: str) -> str:
    token = token.strip()
    if token.upper() == "4K":
        return "4K"
    return token.lower()


def parse_quality_heading(text: str) -> QualityMatch | None:
    """Match *text* against the ordered heading patterns.

    ``"HQ 1080p [3.7GB]"`` yields ``QualityMatch("1080p", "3.7GB", "HQ")``.
    Falls back to a bare quality token (size ``Unknown``) and returns
    ``None`` when the text names no quality at all.
    """
    for pattern, q_idx, codec_idx, size_idx in _HEADING_PATTERNS:
        m = pattern.search(text)
        if not m:
            continue
        quality = normalize_quality(m.group(q_idx))
        codec = m.group(codec_idx) if codec_idx is not None else None
        if pattern is _HEADING_PATTERNS[0][0]:
            codec = "HQ"
        size = clean_size(m.group(size_idx)) if size_idx is not None else UNKNOWN
        if size == UNKNOWN:
            size = size_from_text(text) or UNKNOWN
        if codec is None:
            codec = codec_from_text(text)
        return QualityMatch(quality=quality, size=size, codec=codec)

    if not _HEADING_QUALITY_RE.search(text):
        return None
    hq = _HQ_RE.search(text)
    quality = normalize_quality(hq.group(1)) if hq else quality_from_text(text)
    return QualityMatch(
        quality=quality,
        size=size_from_text(text) or UNKNOWN,
        codec="HQ" if hq else codec_from_text(text),
    )


def is_quality_heading(text: str) -> bool:
    return bool(_HEADING_QUALITY_RE.search(text))


def quality_from_text(text: str) -> str:
    """Best-effort quality token in free text; ``"Unknown"`` if none."""
    hq = _HQ_RE.search(text)
    if hq:
        return normalize_quality(hq.group(1))
    m = _QUALITY_TOKEN_RE.search(text)
    if m:
        token = m.group(1)
        return "4K" if token.lower() in {"4k", "2160p"} else token.lower()
    lowered = text.lower()
    if "uhd" in lowered or "ultra" in lowered:
        return "4K"
    if "full hd" in lowered:
        return "1080p"
    if re.search(r"\bhd\b", lowered):
        return "720p"
    return UNKNOWN


def page_quality(text: str) -> str:
    """Quality used for episode links: first of 1080p/720p/4K/480p in page text."""
    lowered = text.lower()
    for token, label in (("1080p", "1080p"), ("720p", "720p"), ("4k", "4K"), ("480p", "480p")):
        if token in lowered:
            return label
    return UNKNOWN


def size_from_text(text: str) -> str | None:
    for pattern in _SIZE_PATTERNS:
        m = pattern.search(text)
        if m:
            size = clean_size(m.group(1))
            if size != UNKNOWN:
                return size
    return None


def codec_from_text(text: str) -> str | None:
    m = _CODEC_RE.search(text)
    return m.group(1) if m else None


def should_ignore(text: str) -> bool:
    """Sample clips, alternate cuts and similar headings carry no real downloads."""
    return any(p.search(text) for p in _IGNORE_PATTERNS)
