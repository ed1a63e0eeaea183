"""Tests for the camelCase JSON presenter."""

from __future__ import annotations

from netvlyx.domain.entities import (
    CastMember,
    ContentRecord,
    DebugReport,
    DownloadGroup,
    DownloadLink,
    DriveEpisode,
    DriveRecord,
    DriveServer,
    EpisodeRecord,
    FetchAttempt,
    HosterChoice,
    LinkButton,
    LinkPageRecord,
    LinkSection,
    LinkStatus,
    ResolvedDownload,
    SampleLink,
    TitleMetadata,
    Trailer,
    VlyxRecord,
)
from netvlyx.interfaces.api.extract.presenter import (
    present_debug,
    present_download,
    present_failure,
    present_metadata,
    present_record,
)


def _record() -> ContentRecord:
    group = DownloadGroup(title="Season 1 - 720p [1GB]", season="1")
    group.variant("720p", "1GB", codec="HEVC").add_link(
        DownloadLink(label="G-Direct", url="https://hubcdn.fans/file/a", server="VlyJes Server")
    )
    episode = EpisodeRecord(
        episode_number=2,
        download_links=[
            DownloadLink(
                label="Watch",
                url="https://hubstream.art/x",
                is_streaming=True,
                status=LinkStatus.STREAM,
                style="color: #00ffff",
            )
        ],
    )
    return ContentRecord(
        title="Show",
        download_groups=[group],
        episodes=[episode],
        trailer=Trailer(
            video_id="abc",
            embed_url="https://www.youtube.com/embed/abc",
            thumbnail="https://img.youtube.com/vi/abc/hqdefault.jpg",
        ),
    )


class TestPresentContent:
    def test_top_level_keys(self) -> None:
        body = present_record(ContentRecord(title="Untitled"))
        assert set(body) == {
            "title",
            "posterUrl",
            "externalRating",
            "externalRatingLink",
            "metadata",
            "synopsis",
            "images",
            "hasTrustedImages",
            "downloadGroups",
            "episodes",
            "trailer",
            "watchOnlineUrl",
        }
        assert body["downloadGroups"] == []
        assert body["episodes"] == []
        assert body["trailer"] is None
        assert body["metadata"]["releaseYear"] is None

    def test_groups_and_links(self) -> None:
        body = present_record(_record())
        group = body["downloadGroups"][0]
        assert group["season"] == "1"
        variant = group["qualityVariants"][0]
        assert variant == {
            "quality": "720p",
            "size": "1GB",
            "codec": "HEVC",
            "links": [
                {
                    "label": "G-Direct",
                    "url": "https://hubcdn.fans/file/a",
                    "server": "VlyJes Server",
                    "season": None,
                    "isStreaming": False,
                    "status": "Active",
                    "speed": "Medium",
                }
            ],
        }

    def test_episode_and_trailer(self) -> None:
        body = present_record(_record())
        episode = body["episodes"][0]
        assert episode["episodeNumber"] == 2
        assert episode["title"] == "Episode 2"
        link = episode["downloadLinks"][0]
        assert link["status"] == "Stream"
        assert link["isStreaming"] is True
        assert link["style"] == "color: #00ffff"
        assert body["trailer"]["videoId"] == "abc"


class TestPresentDrive:
    def test_movie_shape(self) -> None:
        record = DriveRecord(
            title="Movie",
            servers=[DriveServer(name="V-Cloud", url="https://vcloud.test/a")],
        )
        assert present_record(record) == {
            "title": "Movie",
            "type": "movie",
            "movie": {
                "servers": [{"name": "V-Cloud", "url": "https://vcloud.test/a"}],
                "alternatives": [],
            },
        }

    def test_episode_shape(self) -> None:
        record = DriveRecord(
            title="Show",
            kind="episode",
            episodes=[
                DriveEpisode(
                    episode_number=1,
                    servers=[DriveServer(name="G-Direct", url="https://g.test/1", style="x")],
                )
            ],
        )
        body = present_record(record)
        assert body["type"] == "episode"
        assert body["episodes"] == [
            {
                "episodeNumber": 1,
                "servers": [{"name": "G-Direct", "url": "https://g.test/1", "style": "x"}],
            }
        ]



class TestPresentLinkPage:
    def test_episode_shape(self) -> None:
        record = LinkPageRecord(
            sections=[
                LinkSection(
                    title="-:Episodes: 3:-",
                    episode_number=3,
                    links=[LinkButton(name="V-Cloud", url="https://vcloud.lol/3", is_vcloud=True)],
                )
            ]
        )
        body = present_record(record)
        assert body == {
            "linkData": [
                {
                    "title": "-:Episodes: 3:-",
                    "episodeNumber": 3,
                    "quality": None,
                    "links": [
                        {
                            "name": "V-Cloud",
                            "url": "https://vcloud.lol/3",
                            "isVCloud": True,
                            "isHubCloud": False,
                        }
                    ],
                }
            ],
            "type": "episode",
            "totalEpisodes": 3,
        }

    def test_empty_page(self) -> None:
        assert present_record(LinkPageRecord()) == {
            "linkData": [],
            "type": "unknown",
            "totalEpisodes": 0,
        }


class TestPresentVlyx:
    def test_quality_selection(self) -> None:
        record = VlyxRecord(
            original_url="https://v.test/?id=1",
            kind="quality_selection",
            choices=[
                HosterChoice(
                    quality="720p",
                    links={
                        "hubdrive": "https://hubdrive.wales/file/1",
                        "gofile": "https://gofile.io/d/1",
                    },
                    link_type="hubdrive",
                )
            ],
        )
        body = present_record(record)
        assert body["success"] is True
        assert body["type"] == "quality_selection"
        assert body["qualities"] == [
            {
                "quality": "720p",
                "hubdriveLink": "https://hubdrive.wales/file/1",
                "gofileLink": "https://gofile.io/d/1",
                "preferredLink": "https://hubdrive.wales/file/1",
                "linkType": "hubdrive",
            }
        ]
        assert "directLink" not in body

    def test_single(self) -> None:
        record = VlyxRecord(
            original_url="https://v.test/?id=2",
            kind="single",
            choices=[
                HosterChoice(
                    quality="Single Quality",
                    links={"gofile": "https://gofile.io/d/2"},
                    link_type="gofile",
                )
            ],
        )
        body = present_record(record)
        assert body["directLink"] == "https://gofile.io/d/2"
        assert body["linkType"] == "gofile"
        assert body["originalUrl"] == "https://v.test/?id=2"

    def test_none(self) -> None:
        body = present_record(VlyxRecord(original_url="https://v.test/?id=3"))
        assert body == {
            "success": False,
            "error": "No supported download links found on the page",
            "originalUrl": "https://v.test/?id=3",
        }


class TestPresentDownload:
    def test_shape(self) -> None:
        resolved = ResolvedDownload(
            source_url="https://hubdrive.wales/file/1",
            download_url="https://pixel.hubcdn.fans/u/1",
            method="mirror",
            steps=["https://hubcloud.one/drive/1", "https://90fpsconfig.in/x"],
        )
        assert present_download(resolved) == {
            "downloadUrl": "https://pixel.hubcdn.fans/u/1",
            "sourceUrl": "https://hubdrive.wales/file/1",
            "method": "mirror",
            "steps": ["https://hubcloud.one/drive/1", "https://90fpsconfig.in/x"],
        }

class TestPresentDebugAndFailure:
    def test_debug(self) -> None:
        report = DebugReport(
            requested_url="https://a.test/",
            strategy="external",
            attempts=[
                FetchAttempt(
                    strategy="external",
                    fetch_url="https://scraper.test/api?url=x",
                    status=200,
                    ok=True,
                    external_method="playwright",
                )
            ],
            html_length=1000,
            selector_counts={"headings": 3},
            sample_links=[SampleLink(text="Download", href="https://hubcdn.fans/file/a")],
        )
        body = present_debug(report)
        assert body["requestedUrl"] == "https://a.test/"
        assert body["attempts"][0]["externalMethod"] == "playwright"
        assert body["attempts"][0]["fetchUrl"] == "https://scraper.test/api?url=x"
        assert body["selectorCounts"] == {"headings": 3}
        assert body["sampleLinks"] == [{"text": "Download", "href": "https://hubcdn.fans/file/a"}]
        assert "note" not in body

    def test_failure_shapes(self) -> None:
        assert present_failure("boom", "page") == {"error": "boom"}
        assert present_failure("boom", "drive") == {
            "error": "boom",
            "type": "movie",
            "title": "Unknown",
            "movie": {"servers": []},
        }


class TestPresentMetadata:
    def test_metadata(self) -> None:
        body = present_metadata(
            TitleMetadata(
                title="Inception",
                rating="8.4",
                cast=[CastMember(name="Leo", character="Cobb")],
                trailer_key="k",
            )
        )
        assert body["rating"] == "8.4"
        assert body["cast"] == [{"name": "Leo", "character": "Cobb", "profileImage": None}]
        assert body["trailerKey"] == "k"
        assert body["contentType"] == "movie"
