"""Extraction results and their optional diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from netvlyx.domain.templates import TemplateFamily

from .content import ContentRecord, DriveRecord
from .links import LinkPageRecord, VlyxRecord
from .source import FetchAttempt, SourceDocument

ParsedRecord = Union[ContentRecord, DriveRecord, LinkPageRecord, VlyxRecord]


@dataclass(frozen=True)
class SampleLink:
    text: str
    href: str


@dataclass
class DebugReport:
    """Diagnostics returned next to a result when debug output is requested."""

    requested_url: str
    final_url: str | None = None
    strategy: str | None = None
    attempts: list[FetchAttempt] = field(default_factory=list)
    html_length: int = 0
    selector_counts: dict[str, int] | None = None
    parsed_sections_count: int = 0
    total_parsed_links: int = 0
    sample_headers: list[str] = field(default_factory=list)
    sample_links: list[SampleLink] = field(default_factory=list)
    html_preview: str = ""
    note: str | None = None


@dataclass
class ExtractionResult:
    template: str
    family: TemplateFamily
    record: ParsedRecord
    source: SourceDocument
    debug: DebugReport | None = None
