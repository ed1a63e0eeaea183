"""Tests for link validation, server classification and batch dedup."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from netvlyx.domain.entities import (
    DownloadGroup,
    DownloadLink,
    EpisodeRecord,
    LinkStatus,
    QualityVariant,
)
from netvlyx.infrastructure.extraction.links import (
    LinkClassifier,
    classify,
    is_placeholder_url,
    looks_like_stream,
    remove_batch_duplicates,
    rewrite_url,
    speed_for_server,
)

# ---------------------------------------------------------------------------
# URL validation
# ---------------------------------------------------------------------------


class TestUrlValidation:
    @pytest.mark.parametrize(
        "url",
        ["#", "", "   ", "#download", "javascript:void(0)", "JavaScript:alert(1)", None],
    )
    def test_placeholders_rejected(self, classifier: LinkClassifier, url: str | None) -> None:
        assert classifier.is_valid_download_url(url) is False
        assert classifier.build_link("Download", url) is None

    def test_placeholder_helper(self) -> None:
        assert is_placeholder_url("#") is True
        assert is_placeholder_url("https://hubcdn.fans/file/1") is False

    def test_unknown_domain_rejected(self, classifier: LinkClassifier) -> None:
        assert classifier.is_valid_download_url("https://ads.example.com/x") is False

    def test_allowed_domain_accepted(self, classifier: LinkClassifier) -> None:
        assert classifier.is_valid_download_url("https://www.mediafire.com/file/abc") is True

    def test_template_domains_extend_allow_list(self) -> None:
        url = "https://nexdrive.pro/abc123/"
        assert LinkClassifier().is_valid_download_url(url) is False
        assert LinkClassifier(("nexdrive",)).is_valid_download_url(url) is True


# ---------------------------------------------------------------------------
# Server classification
# ---------------------------------------------------------------------------


class TestClassify:
    @pytest.mark.parametrize(
        ("url", "server"),
        [
            ("https://hubdrive.space/file/123", "NetVlyx Server"),
            ("https://hubcdn.fans/file/abc", "VlyJes Server"),
            ("https://techyboy4u.com/?id=xyz", "Vlyx Server"),
            ("https://taazabull24.com/?id=xyz", "Vlyx Server"),
            ("https://hubstream.art/#abc", "HDStream4u"),
            ("https://hdstream4u.com/file/abc", "HDStream4u"),
            ("https://drive.google.com/file/d/1", "Google Drive"),
            ("https://www.mediafire.com/file/x", "MediaFire"),
            ("https://mega.nz/file/x", "MEGA"),
            ("https://www.dropbox.com/s/x", "Dropbox"),
            ("https://hubcdn.xyz/dl/1", "HubCDN"),
            ("https://techyboy4u.com/post/1", "TechyBoy4u"),
            ("https://gofile.io/d/abc", "Direct Link"),
        ],
    )
    def test_server_table(self, url: str, server: str) -> None:
        assert classify(url) == server

    def test_speed_hint(self) -> None:
        assert speed_for_server("NetVlyx Server") == "Fast"
        assert speed_for_server("Google Drive") == "Fast"
        assert speed_for_server("MediaFire") == "Medium"

    def test_hubdrive_file_rewritten(self) -> None:
        assert rewrite_url("https://hubdrive.space/file/12345") == "/download/12345"
        assert rewrite_url("https://mega.nz/file/x") == "https://mega.nz/file/x"

    def test_stream_detection(self) -> None:
        assert looks_like_stream("Watch Online") is True
        assert looks_like_stream("G-Direct", style="background:#00ffff") is True
        assert looks_like_stream("Mirror", server="HDStream4u") is True
        assert looks_like_stream("Download") is False


class TestBuildLink:
    def test_fields_populated(self, classifier: LinkClassifier) -> None:
        link = classifier.build_link(
            "Download 720p", "https://hubdrive.space/file/99", season="2", quality="720p"
        )
        assert link is not None
        assert link.url == "/download/99"
        assert link.server == "NetVlyx Server"
        assert link.season == "2"
        assert link.speed == "Fast"
        assert link.status is LinkStatus.ACTIVE
        assert link.is_streaming is False

    def test_streaming_link_status(self, classifier: LinkClassifier) -> None:
        link = classifier.build_link("Watch", "https://hubstream.art/#x")
        assert link is not None
        assert link.is_streaming is True
        assert link.status is LinkStatus.STREAM

    def test_empty_label_defaults(self, classifier: LinkClassifier) -> None:
        link = classifier.build_link("", "https://gofile.io/d/1")
        assert link is not None
        assert link.label == "Download"


# ---------------------------------------------------------------------------
# Batch dedup
# ---------------------------------------------------------------------------


class TestRemoveBatchDuplicates:
    def test_episode_url_removed_from_batch(
        self, make_link: Callable[..., DownloadLink]
    ) -> None:
        shared = "https://hubcdn.fans/file/ep1"
        batch = DownloadGroup(
            title="Season 1 - 720p [4GB]",
            season="1",
            quality_variants=[
                QualityVariant(
                    quality="720p",
                    size="4GB",
                    links=[make_link(shared), make_link("https://hubcdn.fans/file/zip")],
                )
            ],
        )
        episode = EpisodeRecord(episode_number=1, download_links=[make_link(shared)])

        groups = remove_batch_duplicates([batch], [episode])

        urls = [link.url for g in groups for v in g.quality_variants for link in v.links]
        assert urls == ["https://hubcdn.fans/file/zip"]
        assert [link.url for link in episode.download_links] == [shared]

    def test_emptied_groups_dropped(self, make_link: Callable[..., DownloadLink]) -> None:
        url = "https://hubcdn.fans/file/ep1"
        group = DownloadGroup(
            title="720p",
            quality_variants=[QualityVariant(quality="720p", links=[make_link(url)])],
        )
        episode = EpisodeRecord(episode_number=1, download_links=[make_link(url)])

        assert remove_batch_duplicates([group], [episode]) == []

    def test_no_episodes_keeps_groups(self, make_link: Callable[..., DownloadLink]) -> None:
        group = DownloadGroup(
            title="720p",
            quality_variants=[
                QualityVariant(quality="720p", links=[make_link("https://gofile.io/d/1")])
            ],
        )
        assert remove_batch_duplicates([group], []) == [group]
