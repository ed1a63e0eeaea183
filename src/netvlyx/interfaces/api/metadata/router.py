"""Title metadata lookup (external rating, poster, cast) by IMDb ID."""

from __future__ import annotations

import re
from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from netvlyx.interfaces.api.extract.presenter import present_metadata
from netvlyx.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/metadata", tags=["metadata"])

_IMDB_ID = re.compile(r"^tt\d{5,10}$")


@router.get("/{imdb_id}")
async def metadata(request: Request, imdb_id: str) -> JSONResponse:
    """Return ``{rating, poster, overview, cast, trailerKey, contentType}``.

    503 when no TMDB key is configured, 404 when the ID is unknown.
    """
    state = cast(AppState, request.app.state)
    client = state.metadata_client
    if client is None:
        return JSONResponse(status_code=503, content={"error": "metadata_not_configured"})

    if not _IMDB_ID.match(imdb_id):
        return JSONResponse(status_code=400, content={"error": "Invalid IMDb ID"})

    found = await client.lookup(imdb_id)
    if found is None:
        log.info("metadata_not_found", imdb_id=imdb_id)
        return JSONResponse(status_code=404, content={"error": "Not found"})

    return JSONResponse(content=present_metadata(found))
