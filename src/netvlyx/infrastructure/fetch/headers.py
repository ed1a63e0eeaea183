"""Browser header bundles for direct fetches."""

from __future__ import annotations

from netvlyx.infrastructure.config.schema import HeaderProfile

BROWSER_HEADERS: dict[str, str] = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
}

CHROMIUM_HINTS: dict[str, str] = {
    "Sec-Ch-Ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"Windows"',
}


def build_headers(profile: HeaderProfile) -> dict[str, str]:
    """Full request headers for *profile*."""
    headers = {"User-Agent": profile.user_agent, **BROWSER_HEADERS}
    if profile.chromium:
        headers.update(CHROMIUM_HINTS)
        if "Macintosh" in profile.user_agent:
            headers["Sec-Ch-Ua-Platform"] = '"macOS"'
    headers.update(profile.headers)
    return headers
