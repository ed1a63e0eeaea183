"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from netvlyx.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from netvlyx.application.use_cases.extract_content import ExtractContentUseCase
    from netvlyx.application.use_cases.resolve_download import ResolveDownloadUseCase
    from netvlyx.domain.ports import (
        MetadataLookupPort,
        PageFetcherPort,
        TemplateRegistryPort,
    )


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Domain Ports
    templates: TemplateRegistryPort
    fetcher: PageFetcherPort

    # Application Services
    extract_uc: ExtractContentUseCase
    resolve_uc: ResolveDownloadUseCase

    # Metadata lookup (optional, requires TMDB API key)
    metadata_client: MetadataLookupPort | None
