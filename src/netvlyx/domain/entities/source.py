"""Fetch-side value objects."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FetchAttempt:
    """One network attempt made by the fetch layer."""

    strategy: str
    fetch_url: str
    status: int | None = None
    ok: bool = False
    error: str | None = None
    final_url: str | None = None
    redirected: bool = False
    bytes: int | None = None
    external_method: str | None = None
    title_header: str | None = None


@dataclass
class SourceDocument:
    """Raw HTML of a fetched page plus how it was obtained."""

    url: str
    html: str
    strategy: str
    final_url: str | None = None
    attempts: list[FetchAttempt] = field(default_factory=list)
