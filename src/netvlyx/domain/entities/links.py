"""Domain entities for intermediate link pages.

Two page shapes sit between a content page and the final hoster:

- link pages: headed blocks of hoster buttons, one block per episode or
  per quality.
- hoster pick pages: per-quality headings (or one flat list) linking the
  same file on several hosters, of which one is preferred.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

LinkPageKind = Literal["episode", "quality", "unknown"]
VlyxKind = Literal["single", "quality_selection", "none"]


@dataclass(frozen=True)
class LinkButton:
    name: str
    url: str
    is_vcloud: bool = False
    is_hubcloud: bool = False


@dataclass
class LinkSection:
    """One heading with the buttons of the block that follows it."""

    title: str
    links: list[LinkButton] = field(default_factory=list)
    episode_number: int | None = None
    quality: str | None = None


@dataclass
class LinkPageRecord:
    sections: list[LinkSection] = field(default_factory=list)

    @property
    def kind(self) -> LinkPageKind:
        if any(s.episode_number is not None for s in self.sections):
            return "episode"
        if any(s.quality is not None for s in self.sections):
            return "quality"
        return "unknown"

    @property
    def total_episodes(self) -> int:
        numbers = [s.episode_number for s in self.sections if s.episode_number]
        return max(numbers) if numbers else 0

    @property
    def link_count(self) -> int:
        return sum(len(s.links) for s in self.sections)


@dataclass
class HosterChoice:
    """Hoster URLs for one quality; ``link_type`` names the preferred one."""

    quality: str
    links: dict[str, str] = field(default_factory=dict)
    link_type: str = "other"

    @property
    def preferred_url(self) -> str:
        return self.links.get(self.link_type, "")


@dataclass
class VlyxRecord:
    original_url: str
    kind: VlyxKind = "none"
    choices: list[HosterChoice] = field(default_factory=list)

    @property
    def direct(self) -> HosterChoice | None:
        if self.kind == "single" and self.choices:
            return self.choices[0]
        return None

    @property
    def link_count(self) -> int:
        return sum(len(c.links) for c in self.choices)
