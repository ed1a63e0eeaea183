"""Port for fetching source pages."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from netvlyx.domain.entities import SourceDocument
from netvlyx.domain.templates import ExternalPlacement


@runtime_checkable
class PageFetcherPort(Protocol):
    """Async interface returning the raw HTML of a page."""

    async def fetch(
        self,
        url: str,
        *,
        external: ExternalPlacement = "fallback",
        external_first_hosts: Sequence[str] = (),
        min_html_length: int = 0,
        trailing_slash: bool = False,
    ) -> SourceDocument:
        """Fetch *url*; raises ``FetchExhausted`` when no strategy succeeds."""
        ...
