"""Bot-challenge / interstitial page detection.

Proxies often relay a challenge page with status 200, so detection looks
at the body only. Only interstitial markers count: ordinary pages on
Cloudflare-fronted hosts embed ``/cdn-cgi/challenge-platform/`` scripts
and Turnstile widgets.
"""

from __future__ import annotations

_CHALLENGE_MARKERS: tuple[str, ...] = (
    "Just a moment...",
    "cf-browser-verification",
    "_cf_chl_opt",
)

# Matched case-insensitively.
_CHALLENGE_PHRASES: tuple[str, ...] = (
    "checking your browser",
    "attention required! | cloudflare",
)

_HTML_MARKERS: tuple[str, ...] = ("<html", "<!doctype")


def is_bot_challenge(html: str) -> bool:
    """Return *True* when *html* is a DDoS-protection interstitial."""
    if any(marker in html for marker in _CHALLENGE_MARKERS):
        return True
    lowered = html.lower()
    return any(phrase in lowered for phrase in _CHALLENGE_PHRASES)


def looks_like_html(text: str) -> bool:
    """Plausible HTML document (has an ``<html`` or ``<!DOCTYPE`` marker)."""
    lowered = text.lower()
    return any(marker in lowered for marker in _HTML_MARKERS)
