"""Extraction endpoints: ``/extract`` for any template, ``/drive`` for drive pages."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from netvlyx.application.use_cases.extract_content import (
    DRIVE_TEMPLATE,
    ExtractContentUseCase,
    validate_url,
)
from netvlyx.domain.entities import ExtractionResult
from netvlyx.domain.exceptions import (
    FetchExhausted,
    InvalidInputUrl,
    TemplateNotFoundError,
)
from netvlyx.infrastructure.extraction.diagnostics import failure_report
from netvlyx.interfaces.api.extract.presenter import (
    present_debug,
    present_failure,
    present_record,
)
from netvlyx.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["extract"])

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _success(result: ExtractionResult) -> JSONResponse:
    content = present_record(result.record)
    if result.debug is not None:
        content["debug"] = present_debug(result.debug)
    return JSONResponse(content=content)


def _fetch_failed(
    exc: FetchExhausted, *, url: str, family: str, debug: bool
) -> JSONResponse:
    log.error("extract_failed", url=url, attempts=len(exc.attempts), error=str(exc))
    content: dict[str, Any] = present_failure(str(exc), family)
    if debug:
        content["debug"] = present_debug(failure_report(url, exc.attempts))
    return JSONResponse(status_code=500, content=content)


def _bad_request(message: str, **context: Any) -> JSONResponse:
    log.warning("extract_invalid_url", error=message, **context)
    return JSONResponse(status_code=400, content={"error": message})


@router.get("/extract")
async def extract(
    request: Request,
    url: str | None = Query(default=None, description="Source page URL."),
    template: str | None = Query(default=None, description="Template name override."),
    debug: str | None = Query(default=None, description="1 to attach diagnostics."),
) -> JSONResponse:
    """Fetch and parse one source page.

    The template defaults to the registry's host match for *url*, then
    to the configured default template.
    """
    state = cast(AppState, request.app.state)
    uc: ExtractContentUseCase = state.extract_uc
    want_debug = _flag(debug)

    try:
        result = await uc.execute(url, template=template, debug=want_debug)
    except InvalidInputUrl as e:
        return _bad_request(str(e), url=url)
    except TemplateNotFoundError as e:
        return _bad_request(str(e), url=url, template=template)
    except FetchExhausted as e:
        target = validate_url(url)
        family = uc.resolve_template(target, template).family
        return _fetch_failed(e, url=target, family=family, debug=want_debug)

    return _success(result)


@router.get("/drive")
async def drive(
    request: Request,
    link: str | None = Query(default=None, description="Full drive page URL."),
    driveid: str | None = Query(default=None, description="Drive page ID."),
    debug: str | None = Query(default=None, description="1 to attach diagnostics."),
) -> JSONResponse:
    """Parse a drive page by full URL or by ID against the configured hosts."""
    state = cast(AppState, request.app.state)
    uc: ExtractContentUseCase = state.extract_uc
    want_debug = _flag(debug)

    if not link and not driveid:
        return _bad_request("Either 'driveid' or 'link' is required")

    try:
        if link:
            result = await uc.execute(link, template=DRIVE_TEMPLATE, debug=want_debug)
        else:
            result = await uc.execute_drive_id(
                driveid or "", state.config.drive_hosts, debug=want_debug
            )
    except InvalidInputUrl as e:
        return _bad_request(str(e), link=link, driveid=driveid)
    except FetchExhausted as e:
        return _fetch_failed(
            e, url=link or driveid or "", family="drive", debug=want_debug
        )

    return _success(result)
