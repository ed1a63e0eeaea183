"""Port for reading download buttons off hoster pages."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class HosterPagePort(Protocol):
    """Synchronous lookups over raw hoster page HTML."""

    def button_link(self, html: str, button: str, base_url: str) -> str | None:
        """Absolute target URL of the first button labelled *button*, or None."""
        ...

    def direct_link(self, html: str) -> str | None:
        """First anchor pointing straight at a file CDN, or None."""
        ...
