"""Tests for the extract, drive, resolve, metadata and template routes."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from netvlyx.application.use_cases.extract_content import ExtractContentUseCase
from netvlyx.application.use_cases.resolve_download import ResolveDownloadUseCase
from netvlyx.domain.entities import FetchAttempt, SourceDocument, TitleMetadata
from netvlyx.domain.exceptions import FetchExhausted
from netvlyx.infrastructure.config import AppConfig
from netvlyx.infrastructure.extraction.engine import ExtractionEngine
from netvlyx.infrastructure.hosters.buttons import ButtonLinkFinder
from netvlyx.infrastructure.templates.registry import TemplateRegistry
from netvlyx.interfaces.api.extract.router import router as extract_router
from netvlyx.interfaces.api.metadata.router import router as metadata_router
from netvlyx.interfaces.api.resolve.router import router as resolve_router
from netvlyx.interfaces.api.templates.router import router as templates_router

_VEGA_URL = "https://vegamovies.test/movie-2024/"
_VEGA_PAGE = """
<html><body>
<h1 class="entry-title">Movie (2024)</h1>
<div class="entry-content">
  <p>Language: Hindi</p>
  <h3>720p [1GB]</h3>
  <p><a href="https://nexdrive.pro/abc/"><button class="dwd-button">Download</button></a></p>
</div>
</body></html>
"""

_DRIVE_URL = "https://nexdrive.pro/abc/"
_DRIVE_PAGE = """
<html><body>
<h1 class="post-title entry-title">Movie (2024)</h1>
<div class="entry"><p><a href="https://vcloud.test/m"><button>V-Cloud</button></a></p></div>
</body></html>
"""

_M4U_URL = "https://m4ulinks.com/number/42"
_M4U_PAGE = """
<html><body><div class="download-links-div">
  <h5>480p [600MB]</h5>
  <div class="downloads-btns-div"><a href="https://hubcloud.one/drive/q">Hub-Cloud</a></div>
</div></body></html>
"""

_VLYX_URL = "https://techyboy4u.com/?id=none"

_FILE_URL = "https://hubdrive.wales/file/77"
_HUBCLOUD_URL = "https://hubcloud.one/drive/77"
_GENERATED_URL = "https://gamerxyt.com/hubcloud.php?id=77"
_RESOLVE_PAGES = {
    _FILE_URL: f'<a href="{_HUBCLOUD_URL}">HubCloud Server</a>',
    _HUBCLOUD_URL: f'<a href="{_GENERATED_URL}">Generate Direct Download Link</a>',
    _GENERATED_URL: '<a href="https://pixel.hubcdn.fans/u/77">Download [PixelServer : 2]</a>',
}


class StubFetcher:
    """Serves canned pages; every other URL fails on all strategies."""

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages
        self.calls: list[str] = []

    async def fetch(self, url: str, **kwargs: Any) -> SourceDocument:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchExhausted(
                f"All fetch strategies failed for {url}",
                [FetchAttempt(strategy="direct:chrome", fetch_url=url, error="HTTP 404")],
            )
        return SourceDocument(url=url, html=self.pages[url], strategy="direct:chrome")


@pytest.fixture()
def fetcher() -> StubFetcher:
    return StubFetcher(
        {
            _VEGA_URL: _VEGA_PAGE,
            _DRIVE_URL: _DRIVE_PAGE,
            _M4U_URL: _M4U_PAGE,
            _VLYX_URL: "<html><body><p>Nothing yet</p></body></html>",
            **_RESOLVE_PAGES,
        }
    )


@pytest.fixture()
def app(fetcher: StubFetcher, bundled_registry: TemplateRegistry) -> FastAPI:
    app = FastAPI()
    app.include_router(extract_router, prefix="/api/v1")
    app.include_router(metadata_router, prefix="/api/v1")
    app.include_router(resolve_router, prefix="/api/v1")
    app.include_router(templates_router, prefix="/api/v1")

    app.state.config = AppConfig(drive_hosts=["nexdrive.biz", "nexdrive.pro"])
    app.state.templates = bundled_registry
    app.state.metadata_client = None
    app.state.extract_uc = ExtractContentUseCase(
        fetcher=fetcher,
        templates=bundled_registry,
        parser=ExtractionEngine(),
        default_template="vega",
    )
    app.state.resolve_uc = ResolveDownloadUseCase(
        fetcher=fetcher,
        pages=ButtonLinkFinder(),
        hubdrive_host="hubdrive.wales",
        mirror_host="90fpsconfig.in",
    )
    return app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


# ---------------------------------------------------------------------------
# /extract
# ---------------------------------------------------------------------------


class TestExtractRoute:
    def test_success(self, client: TestClient) -> None:
        resp = client.get("/api/v1/extract", params={"url": _VEGA_URL})
        assert resp.status_code == 200
        body = resp.json()
        assert body["title"] == "Movie (2024)"
        assert body["metadata"]["language"] == "Hindi"
        assert "debug" not in body
        links = [
            link["url"]
            for group in body["downloadGroups"]
            for variant in group["qualityVariants"]
            for link in variant["links"]
        ]
        assert links == ["https://nexdrive.pro/abc/"]

    def test_debug_sibling_key(self, client: TestClient) -> None:
        resp = client.get("/api/v1/extract", params={"url": _VEGA_URL, "debug": "1"})
        body = resp.json()
        assert body["debug"]["requestedUrl"] == _VEGA_URL
        assert body["debug"]["strategy"] == "direct:chrome"
        assert body["debug"]["totalParsedLinks"] == 1
        assert "downloadGroups" in body

    def test_missing_url(self, client: TestClient, fetcher: StubFetcher) -> None:
        resp = client.get("/api/v1/extract")
        assert resp.status_code == 400
        assert resp.json() == {"error": "URL is required"}
        assert fetcher.calls == []

    def test_relative_url(self, client: TestClient) -> None:
        resp = client.get("/api/v1/extract", params={"url": "/movie/"})
        assert resp.status_code == 400

    def test_unknown_template(self, client: TestClient) -> None:
        resp = client.get(
            "/api/v1/extract", params={"url": _VEGA_URL, "template": "nope"}
        )
        assert resp.status_code == 400
        assert "nope" in resp.json()["error"]

    def test_fetch_failure(self, client: TestClient) -> None:
        resp = client.get(
            "/api/v1/extract",
            params={"url": "https://vegamovies.test/missing/", "debug": "true"},
        )
        assert resp.status_code == 500
        body = resp.json()
        assert "All fetch strategies failed" in body["error"]
        assert body["debug"]["attempts"][0]["error"] == "HTTP 404"

    def test_fetch_failure_for_drive_url_keeps_drive_shape(
        self, client: TestClient
    ) -> None:
        resp = client.get("/api/v1/extract", params={"url": "https://nexdrive.ink/x/"})
        assert resp.status_code == 500
        assert resp.json()["movie"] == {"servers": []}

    def test_link_page(self, client: TestClient) -> None:
        resp = client.get("/api/v1/extract", params={"url": _M4U_URL})
        assert resp.status_code == 200
        body = resp.json()
        assert body["type"] == "quality"
        assert body["totalEpisodes"] == 0
        assert body["linkData"][0]["links"] == [
            {
                "name": "Hub-Cloud",
                "url": "https://hubcloud.one/drive/q",
                "isVCloud": False,
                "isHubCloud": True,
            }
        ]

    def test_hoster_pick_page_without_hosters(self, client: TestClient) -> None:
        resp = client.get("/api/v1/extract", params={"url": _VLYX_URL})
        assert resp.status_code == 200
        assert resp.json() == {
            "success": False,
            "error": "No supported download links found on the page",
            "originalUrl": _VLYX_URL,
        }


# ---------------------------------------------------------------------------
# /drive
# ---------------------------------------------------------------------------


class TestDriveRoute:
    def test_requires_parameter(self, client: TestClient) -> None:
        resp = client.get("/api/v1/drive")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Either 'driveid' or 'link' is required"}

    def test_link(self, client: TestClient) -> None:
        resp = client.get("/api/v1/drive", params={"link": _DRIVE_URL})
        assert resp.status_code == 200
        body = resp.json()
        assert body["type"] == "movie"
        assert body["movie"]["servers"] == [
            {"name": "V-Cloud", "url": "https://vcloud.test/m"}
        ]

    def test_driveid_tries_hosts_in_order(
        self, client: TestClient, fetcher: StubFetcher
    ) -> None:
        resp = client.get("/api/v1/drive", params={"driveid": "abc"})
        assert resp.status_code == 200
        assert fetcher.calls == ["https://nexdrive.biz/abc/", _DRIVE_URL]

    def test_failure_shape(self, client: TestClient) -> None:
        resp = client.get("/api/v1/drive", params={"driveid": "gone"})
        assert resp.status_code == 500
        body = resp.json()
        assert body["type"] == "movie"
        assert body["title"] == "Unknown"
        assert body["movie"] == {"servers": []}
        assert "nexdrive.biz, nexdrive.pro" in body["error"]


# ---------------------------------------------------------------------------
# /resolve
# ---------------------------------------------------------------------------


class TestResolveRoute:
    def test_requires_parameter(self, client: TestClient, fetcher: StubFetcher) -> None:
        resp = client.get("/api/v1/resolve")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Either 'url' or 'id' is required"}
        assert fetcher.calls == []

    def test_url(self, client: TestClient) -> None:
        resp = client.get("/api/v1/resolve", params={"url": _FILE_URL})
        assert resp.status_code == 200
        assert resp.json() == {
            "downloadUrl": "https://pixel.hubcdn.fans/u/77",
            "sourceUrl": _FILE_URL,
            "method": "pixelserver",
            "steps": [_HUBCLOUD_URL, _GENERATED_URL],
        }

    def test_file_id(self, client: TestClient, fetcher: StubFetcher) -> None:
        resp = client.get("/api/v1/resolve", params={"id": "77"})
        assert resp.status_code == 200
        assert fetcher.calls[0] == _FILE_URL

    def test_unsupported_url(self, client: TestClient) -> None:
        resp = client.get("/api/v1/resolve", params={"url": _VEGA_URL})
        assert resp.status_code == 400
        assert "Not a HubDrive file or HubCloud URL" in resp.json()["error"]

    def test_unreachable_page(self, client: TestClient) -> None:
        resp = client.get("/api/v1/resolve", params={"url": "https://hubdrive.wales/file/gone"})
        assert resp.status_code == 500
        assert "All fetch strategies failed" in resp.json()["error"]

    def test_missing_button(self, client: TestClient, fetcher: StubFetcher) -> None:
        fetcher.pages["https://hubcloud.one/drive/empty"] = "<p>removed</p>"
        resp = client.get(
            "/api/v1/resolve", params={"url": "https://hubcloud.one/drive/empty"}
        )
        assert resp.status_code == 500
        assert "Generate Direct Download Link" in resp.json()["error"]


# ---------------------------------------------------------------------------
# /metadata and /templates
# ---------------------------------------------------------------------------


class TestMetadataRoute:
    def test_not_configured(self, client: TestClient) -> None:
        resp = client.get("/api/v1/metadata/tt1375666")
        assert resp.status_code == 503

    def test_found(self, app: FastAPI, client: TestClient) -> None:
        lookup = MagicMock()
        lookup.lookup = AsyncMock(return_value=TitleMetadata(title="Inception", rating="8.4"))
        app.state.metadata_client = lookup

        resp = client.get("/api/v1/metadata/tt1375666")

        assert resp.status_code == 200
        assert resp.json()["rating"] == "8.4"
        lookup.lookup.assert_awaited_once_with("tt1375666")

    def test_invalid_id(self, app: FastAPI, client: TestClient) -> None:
        app.state.metadata_client = MagicMock()
        resp = client.get("/api/v1/metadata/abc")
        assert resp.status_code == 400

    def test_not_found(self, app: FastAPI, client: TestClient) -> None:
        lookup = MagicMock()
        lookup.lookup = AsyncMock(return_value=None)
        app.state.metadata_client = lookup
        resp = client.get("/api/v1/metadata/tt0000001")
        assert resp.status_code == 404


class TestTemplatesRoute:
    def test_lists_bundled_templates(self, client: TestClient) -> None:
        body = client.get("/api/v1/templates").json()
        assert body["count"] == 7
        names = [t["name"] for t in body["templates"]]
        assert names == [
            "hdhub",
            "lux",
            "m4ulinks",
            "movies4u",
            "nextdrive",
            "vega",
            "vlyx",
        ]
        drive = body["templates"][4]
        assert drive["family"] == "drive"
        assert drive["hosts"] == ["nexdrive"]
