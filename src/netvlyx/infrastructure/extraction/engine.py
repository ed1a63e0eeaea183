"""Template-driven extraction engine: HTML in, record out."""

from __future__ import annotations

import structlog
from bs4 import BeautifulSoup

from netvlyx.domain.entities import (
    ContentRecord,
    DebugReport,
    ParsedRecord,
    SourceDocument,
)
from netvlyx.domain.templates import TemplateDefinition
from netvlyx.infrastructure.extraction.diagnostics import build_debug_report
from netvlyx.infrastructure.extraction.drive import DriveParser
from netvlyx.infrastructure.extraction.episodes import EpisodeParser
from netvlyx.infrastructure.extraction.fields import content_scope, extract_fields
from netvlyx.infrastructure.extraction.link_pages import LinkPageParser
from netvlyx.infrastructure.extraction.links import (
    LinkClassifier,
    remove_batch_duplicates,
)
from netvlyx.infrastructure.extraction.sections import SectionParser
from netvlyx.infrastructure.extraction.vlyx_pages import VlyxPageParser
from netvlyx.infrastructure.html.selectors import parse_html

log = structlog.get_logger(__name__)


class ExtractionEngine:
    """Shared parser for every template; holds no per-page state."""

    def parse(
        self,
        source: SourceDocument,
        template: TemplateDefinition,
        *,
        debug: bool = False,
    ) -> tuple[ParsedRecord, DebugReport | None]:
        doc = parse_html(source.html)
        record: ParsedRecord
        if template.family == "drive":
            record = DriveParser(template.drive, template.fields).parse(doc)
        elif template.family == "links":
            record = LinkPageParser(template.links).parse(doc)
        elif template.family == "vlyx":
            record = VlyxPageParser(template.vlyx).parse(doc, source.url)
        else:
            record = self.parse_page(doc, template, source.html)

        log.info(
            "content_parsed",
            template=template.name,
            url=source.url,
            links=record.link_count,
        )
        report = (
            build_debug_report(source.url, source, doc, template, record) if debug else None
        )
        return record, report

    def parse_page(
        self,
        doc: BeautifulSoup,
        template: TemplateDefinition,
        html: str | None = None,
    ) -> ContentRecord:
        classifier = LinkClassifier(template.allowed_domains)
        record = extract_fields(doc, template.fields, html)
        scope = content_scope(doc, template.fields)

        groups = SectionParser(template.sections, classifier).parse(scope)
        episodes = []
        if template.episodes.enabled:
            episodes = EpisodeParser(template.episodes, classifier).parse(scope)
            groups = remove_batch_duplicates(groups, episodes)

        record.download_groups = groups
        record.episodes = episodes
        return record
