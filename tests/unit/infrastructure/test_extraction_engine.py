"""Tests for the extraction engine and its debug report."""

from __future__ import annotations

from netvlyx.domain.entities import ContentRecord, DriveRecord, LinkPageRecord, VlyxRecord
from netvlyx.infrastructure.extraction.diagnostics import (
    HTML_PREVIEW_CHARS,
    failure_report,
)
from netvlyx.infrastructure.extraction.engine import ExtractionEngine

_SERIES_PAGE = """
<html><body>
<h1>Show Name</h1>
<div class="page-body">
  <h3>1080p WEB-DL [5GB]</h3>
  <p><a href="https://hubcdn.fans/file/pack">Pack Download</a></p>
  <p><a href="https://hubcdn.fans/file/e1">Single Download</a></p>
  <h4>Episode 1</h4>
  <p><a href="https://hubcdn.fans/file/e1">Download</a></p>
</div>
</body></html>
"""

_EMPTY_PAGE = "<html><body><h1>Nothing</h1><div class='page-body'><p>soon</p></div></body></html>"


# ---------------------------------------------------------------------------
# Page family
# ---------------------------------------------------------------------------


class TestPageParsing:
    def test_batch_duplicates_removed_from_groups(self, bundled_registry, make_source) -> None:
        engine = ExtractionEngine()
        record, report = engine.parse(
            make_source(_SERIES_PAGE, "https://hdhub4u.test/show/"),
            bundled_registry.get("hdhub"),
        )

        assert isinstance(record, ContentRecord)
        assert report is None
        assert record.title == "Show Name"
        assert [e.episode_number for e in record.episodes] == [1]
        assert record.episodes[0].download_links[0].url == "https://hubcdn.fans/file/e1"
        group_urls = [
            link.url
            for g in record.download_groups
            for v in g.quality_variants
            for link in v.links
        ]
        assert group_urls == ["https://hubcdn.fans/file/pack"]

    def test_debug_report(self, bundled_registry, make_source) -> None:
        source = make_source(_SERIES_PAGE, "https://hdhub4u.test/show/")
        record, report = ExtractionEngine().parse(
            source, bundled_registry.get("hdhub"), debug=True
        )

        assert report is not None
        assert report.strategy == source.strategy
        assert report.html_length == len(_SERIES_PAGE)
        assert report.total_parsed_links == record.link_count
        assert report.parsed_sections_count == 2
        assert report.selector_counts["headings"] == 2
        assert report.selector_counts["episodeHolders"] >= 2
        assert report.sample_headers == ["1080p WEB-DL [5GB]", "Episode 1"]
        assert report.sample_links[0].href == "https://hubcdn.fans/file/pack"
        assert report.note is None

    def test_debug_note_when_nothing_parsed(self, bundled_registry, make_source) -> None:
        _, report = ExtractionEngine().parse(
            make_source(_EMPTY_PAGE, "https://hdhub4u.test/x/"),
            bundled_registry.get("hdhub"),
            debug=True,
        )
        assert report is not None
        assert report.total_parsed_links == 0
        assert report.note is not None
        assert "hdhub" in report.note

    def test_preview_truncated(self, bundled_registry, make_source) -> None:
        html = _EMPTY_PAGE + "<!--" + "x" * (HTML_PREVIEW_CHARS * 2) + "-->"
        _, report = ExtractionEngine().parse(
            make_source(html, "https://hdhub4u.test/x/"),
            bundled_registry.get("hdhub"),
            debug=True,
        )
        assert report is not None
        assert len(report.html_preview) == HTML_PREVIEW_CHARS


# ---------------------------------------------------------------------------
# Drive family
# ---------------------------------------------------------------------------


class TestDriveDispatch:
    def test_drive_template_yields_drive_record(self, drive_template, make_source) -> None:
        html = (
            "<html><body><h1 class='post-title entry-title'>Movie (2024)</h1>"
            "<div class='entry'>"
            '<a href="https://vcloud.test/abc"><button>V-Cloud</button></a>'
            "</div></body></html>"
        )
        record, report = ExtractionEngine().parse(
            make_source(html, "https://nexdrive.test/abc/"), drive_template, debug=True
        )
        assert isinstance(record, DriveRecord)
        assert report is not None
        assert "episodeHeadings" in report.selector_counts



class TestLinkFamilies:
    def test_link_page_dispatch(self, bundled_registry, make_source) -> None:
        html = (
            "<html><body><div class='download-links-div'>"
            "<h4>-:Episodes: 1:-</h4>"
            "<div class='downloads-btns-div'>"
            '<a href="https://vcloud.lol/e1">V-Cloud</a>'
            '<a href="https://hubcloud.one/e1">Hub-Cloud</a>'
            "</div></div></body></html>"
        )
        record, report = ExtractionEngine().parse(
            make_source(html, "https://m4ulinks.com/number/1"),
            bundled_registry.get("m4ulinks"),
            debug=True,
        )
        assert isinstance(record, LinkPageRecord)
        assert record.kind == "episode"
        assert report is not None
        assert report.selector_counts == {"headings": 1, "buttonBlocks": 1, "anchors": 2}
        assert report.parsed_sections_count == 1
        assert report.total_parsed_links == 2
        assert report.sample_headers == ["-:Episodes: 1:-"]

    def test_vlyx_dispatch_keeps_source_url(self, bundled_registry, make_source) -> None:
        html = (
            "<html><body>"
            '<h3>720p \u2013 [1GB] <a href="https://gofile.io/d/a">GoFile</a></h3>'
            '<h3>1080p - [2GB] <a href="https://hubdrive.wales/file/2">HubDrive</a></h3>'
            "</body></html>"
        )
        url = "https://techyboy4u.com/?id=abc"
        record, report = ExtractionEngine().parse(
            make_source(html, url), bundled_registry.get("vlyx"), debug=True
        )
        assert isinstance(record, VlyxRecord)
        assert record.original_url == url
        assert record.kind == "quality_selection"
        assert [c.link_type for c in record.choices] == ["gofile", "hubdrive"]
        assert report is not None
        assert report.selector_counts == {"headings": 2, "anchors": 2}
        assert report.parsed_sections_count == 2


class TestFailureReport:
    def test_failure_report_carries_attempts(self, make_source) -> None:
        attempts = make_source("<html></html>", "https://x.test/").attempts
        report = failure_report("https://x.test/", attempts)
        assert report.requested_url == "https://x.test/"
        assert report.attempts == attempts
        assert report.html_length == 0
        assert report.note is not None
