"""Season number extraction from free text."""

from __future__ import annotations

import re

# Priority order matters: the bare ``s<N>`` pattern is the most ambiguous
# and must only be tried after the explicit forms.
_SEASON_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"season[-_ ]*(\d+)", re.IGNORECASE),
    re.compile(r"(\d+)(?:st|nd|rd|th)?\s*season", re.IGNORECASE),
    # ``(2023)`` is a release year, not a season.
    re.compile(r"\((?:season\s*)?(?!(?:19|20)\d{2}\))(\d+)\)", re.IGNORECASE),
    re.compile(r"\bs[-_ ]*(\d+)", re.IGNORECASE),
)


def extract_season(text: str | None) -> str | None:
    """Return the season number in *text* as a digit string, or ``None``.

    Leading zeros are dropped (``S02`` -> ``"2"``).
    """
    if not text:
        return None
    for pattern in _SEASON_PATTERNS:
        m = pattern.search(text)
        if m:
            return str(int(m.group(1)))
    return None


def mentions_season(text: str) -> bool:
    return "season" in text.lower()
