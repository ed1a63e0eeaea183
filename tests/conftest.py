"""Shared test fixtures for the NetVlyx test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from netvlyx.domain.entities import DownloadLink, FetchAttempt, SourceDocument
from netvlyx.domain.templates import TemplateDefinition
from netvlyx.infrastructure.extraction.links import LinkClassifier
from netvlyx.infrastructure.templates.registry import TemplateRegistry

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def bundled_registry() -> TemplateRegistry:
    """Registry over the templates shipped with the package."""
    registry = TemplateRegistry()
    registry.discover()
    return registry


@pytest.fixture()
def vega_template(bundled_registry: TemplateRegistry) -> TemplateDefinition:
    return bundled_registry.get("vega")


@pytest.fixture()
def drive_template(bundled_registry: TemplateRegistry) -> TemplateDefinition:
    return bundled_registry.get("nextdrive")


# ---------------------------------------------------------------------------
# Extraction helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def classifier() -> LinkClassifier:
    """Classifier with the drive-page hosts the bundled templates allow."""
    return LinkClassifier(("nexdrive", "vcloud"))


@pytest.fixture()
def make_link() -> Callable[..., DownloadLink]:
    def _make(url: str, label: str = "Download") -> DownloadLink:
        return DownloadLink(label=label, url=url)

    return _make


@pytest.fixture()
def make_source() -> Callable[..., SourceDocument]:
    """Build a SourceDocument as the fetcher would return it."""

    def _make(
        html: str,
        url: str = "https://vegamovies.test/movie/",
        strategy: str = "direct:chrome-win",
    ) -> SourceDocument:
        return SourceDocument(
            url=url,
            html=html,
            strategy=strategy,
            final_url=url,
            attempts=[
                FetchAttempt(strategy=strategy, fetch_url=url, status=200, ok=True)
            ],
        )

    return _make
