"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from netvlyx.application.use_cases.extract_content import ExtractContentUseCase
from netvlyx.application.use_cases.resolve_download import ResolveDownloadUseCase
from netvlyx.infrastructure.extraction.engine import ExtractionEngine
from netvlyx.infrastructure.fetch.fetcher import StrategyFetcher
from netvlyx.infrastructure.hosters.buttons import ButtonLinkFinder
from netvlyx.infrastructure.templates.registry import TemplateRegistry
from netvlyx.infrastructure.tmdb.client import HttpxTmdbClient
from netvlyx.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP Client (shared by fetcher and metadata client)
        2. Template Registry
        3. Fetcher, parser engine, extraction and resolve use cases
        4. Metadata client (only with a TMDB key)
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client; the fetcher follows redirects itself
    state.http_client = httpx.AsyncClient(follow_redirects=False)
    log.info("http_client_initialized")

    # 2) Template registry (lazy: discovery only reads names)
    registry = TemplateRegistry(config.template_dir)
    registry.discover()
    state.templates = registry
    log.info(
        "template_registry_ready",
        count=len(registry.list_names()),
        template_dir=str(registry.template_dir),
    )

    # 3) Fetch + parse + use case
    state.fetcher = StrategyFetcher(config.fetch, http_client=state.http_client)
    state.extract_uc = ExtractContentUseCase(
        fetcher=state.fetcher,
        templates=registry,
        parser=ExtractionEngine(),
        default_template=config.default_template,
    )
    state.resolve_uc = ResolveDownloadUseCase(
        fetcher=state.fetcher,
        pages=ButtonLinkFinder(),
        hubdrive_host=config.hubdrive_host,
        mirror_host=config.mirror_host,
    )

    # 4) Metadata lookup
    if config.tmdb_api_key:
        state.metadata_client = HttpxTmdbClient(
            api_key=config.tmdb_api_key, http_client=state.http_client
        )
        log.info("metadata_client_initialized")
    else:
        state.metadata_client = None
        log.info("metadata_client_disabled", reason="no_tmdb_api_key")

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
