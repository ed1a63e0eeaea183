"""Debug report for template-breakage diagnosis.

Counts how many elements each template selector matched and samples the
headings and links the parsers saw. Purely additive: nothing here feeds
back into the extracted record.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from netvlyx.domain.entities import (
    DebugReport,
    DriveRecord,
    FetchAttempt,
    LinkPageRecord,
    ParsedRecord,
    SampleLink,
    SourceDocument,
    VlyxRecord,
)
from netvlyx.domain.templates import TemplateDefinition
from netvlyx.infrastructure.extraction.fields import content_scope
from netvlyx.infrastructure.html.selectors import attr, element_text

SAMPLE_SIZE = 5
HTML_PREVIEW_CHARS = 1200


def _anchor_text(anchor: Tag) -> str:
    text = element_text(anchor)
    if not text:
        button = anchor.find("button")
        text = element_text(button) if button is not None else ""
    return text or "(no text)"


def _has_marker(anchor: Tag, markers: tuple[str, ...]) -> bool:
    href = attr(anchor, "href").lower()
    return any(marker in href for marker in markers)


def selector_counts(
    doc: BeautifulSoup, template: TemplateDefinition
) -> dict[str, int]:
    """Match counts for the selectors the template relies on."""
    if template.family == "drive":
        rules = template.drive
        return {
            "episodeHeadings": len(doc.select(rules.episode_heading)),
            "contentLinks": len(doc.select(", ".join(rules.content_links))),
            "alternativeLinks": len(doc.select(", ".join(rules.alternative_links))),
            "anchors": len(doc.select("a[href]")),
        }
    if template.family == "links":
        return {
            "headings": len(doc.select(template.links.heading_selector)),
            "buttonBlocks": len(doc.select(template.links.buttons_selector)),
            "anchors": len(doc.select("a[href]")),
        }
    if template.family == "vlyx":
        return {
            "headings": len(doc.select(template.vlyx.quality_heading)),
            "anchors": len(doc.select("a[href]")),
        }

    scope = content_scope(doc, template.fields)
    sections = template.sections
    counts = {
        "headings": len(scope.select(sections.heading_selector)),
        "globalHeadings": len(doc.select(sections.heading_selector)),
        "anchors": len(doc.select("a[href]")),
        "anchorsInScope": len(scope.select("a[href]")),
    }
    if sections.button_selector:
        counts["buttons"] = len(scope.select(sections.button_selector))
        counts["globalButtons"] = len(doc.select(sections.button_selector))
    if sections.anchor_markers:
        counts["markerAnchors"] = sum(
            1 for a in doc.select("a[href]") if _has_marker(a, sections.anchor_markers)
        )
        counts["markerAnchorsInScope"] = sum(
            1 for a in scope.select("a[href]") if _has_marker(a, sections.anchor_markers)
        )
    if template.episodes.enabled:
        counts["episodeHolders"] = len(scope.select("h2, h3, h4, h5, p"))
    return counts


def _samples(
    doc: BeautifulSoup, template: TemplateDefinition
) -> tuple[list[str], list[SampleLink]]:
    if template.family == "drive":
        headings = doc.select(template.drive.episode_heading)
        anchors = doc.select("a[href]")
    elif template.family == "links":
        headings = doc.select(template.links.heading_selector)
        anchors = [
            a
            for block in doc.select(template.links.buttons_selector)
            for a in block.select("a[href]")
        ]
    elif template.family == "vlyx":
        headings = doc.select(template.vlyx.quality_heading)
        anchors = doc.select("a[href]")
    else:
        scope = content_scope(doc, template.fields)
        headings = scope.select(template.sections.heading_selector)
        anchors = scope.select("a[href]")
        markers = template.sections.anchor_markers
        if markers:
            anchors = [a for a in anchors if _has_marker(a, markers)]

    sample_headers = [element_text(h) for h in headings[:SAMPLE_SIZE]]
    sample_links = [
        SampleLink(text=_anchor_text(a), href=attr(a, "href"))
        for a in anchors[:SAMPLE_SIZE]
    ]
    return sample_headers, sample_links


def build_debug_report(
    requested_url: str,
    source: SourceDocument,
    doc: BeautifulSoup,
    template: TemplateDefinition,
    record: ParsedRecord,
) -> DebugReport:
    sections: int
    if isinstance(record, DriveRecord):
        sections = len(record.episodes) if record.kind == "episode" else len(record.servers)
    elif isinstance(record, LinkPageRecord):
        sections = len(record.sections)
    elif isinstance(record, VlyxRecord):
        sections = len(record.choices)
    else:
        sections = len(record.download_groups) + len(record.episodes)
    total = record.link_count
    headers, links = _samples(doc, template)

    note = None
    if total == 0:
        note = (
            f"No links parsed with template '{template.name}'. "
            "Compare selectorCounts and sampleHeaders against the page markup."
        )

    return DebugReport(
        requested_url=requested_url,
        final_url=source.final_url,
        strategy=source.strategy,
        attempts=list(source.attempts),
        html_length=len(source.html),
        selector_counts=selector_counts(doc, template),
        parsed_sections_count=sections,
        total_parsed_links=total,
        sample_headers=headers,
        sample_links=links,
        html_preview=source.html[:HTML_PREVIEW_CHARS],
        note=note,
    )


def failure_report(requested_url: str, attempts: list[FetchAttempt]) -> DebugReport:
    """Debug report for a fetch that never produced HTML."""
    return DebugReport(
        requested_url=requested_url,
        attempts=list(attempts),
        note="Fetch failed on every strategy; see attempts.",
    )
