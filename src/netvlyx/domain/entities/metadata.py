"""Value objects returned by the metadata lookup collaborator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class CastMember:
    name: str
    character: str = ""
    profile_image: str | None = None


@dataclass(frozen=True)
class TitleMetadata:
    """External rating and poster enrichment for one title."""

    title: str
    rating: str | None = None
    poster: str | None = None
    overview: str = ""
    cast: list[CastMember] = field(default_factory=list)
    trailer_key: str | None = None
    content_type: Literal["movie", "tv"] = "movie"
