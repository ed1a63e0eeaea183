"""Download resolution: HubDrive / HubCloud page to direct file URL."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from netvlyx.application.use_cases.resolve_download import ResolveDownloadUseCase
from netvlyx.domain.exceptions import (
    DownloadResolutionError,
    FetchExhausted,
    InvalidInputUrl,
)
from netvlyx.interfaces.api.extract.presenter import present_download
from netvlyx.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["resolve"])


@router.get("/resolve")
async def resolve(
    request: Request,
    url: str | None = Query(default=None, description="HubDrive file or HubCloud URL."),
    id: str | None = Query(default=None, description="HubDrive file ID."),
) -> JSONResponse:
    """Return ``{downloadUrl, sourceUrl, method, steps}``.

    400 for a missing or unsupported URL, 500 when the chain breaks.
    """
    state = cast(AppState, request.app.state)
    uc: ResolveDownloadUseCase = state.resolve_uc

    if not url and not id:
        return JSONResponse(
            status_code=400, content={"error": "Either 'url' or 'id' is required"}
        )

    try:
        if url:
            resolved = await uc.execute(url)
        else:
            resolved = await uc.execute_file_id(id or "")
    except InvalidInputUrl as e:
        log.warning("resolve_invalid_url", url=url, file_id=id, error=str(e))
        return JSONResponse(status_code=400, content={"error": str(e)})
    except (FetchExhausted, DownloadResolutionError) as e:
        log.error("resolve_failed", url=url, file_id=id, error=str(e))
        return JSONResponse(status_code=500, content={"error": str(e)})

    return JSONResponse(content=present_download(resolved))
