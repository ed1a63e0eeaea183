"""Port for title metadata lookups (ratings, poster, cast, trailer)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from netvlyx.domain.entities import TitleMetadata


@runtime_checkable
class MetadataLookupPort(Protocol):
    """Async interface for metadata by IMDb ID."""

    async def lookup(self, imdb_id: str) -> TitleMetadata | None:
        """Return metadata for *imdb_id*, or None if the title is unknown."""
        ...
