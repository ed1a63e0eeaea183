"""Template listing endpoint."""

from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from netvlyx.interfaces.app_state import AppState

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("")
async def list_templates(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    templates = [
        {
            "name": t.name,
            "version": t.version,
            "family": t.family,
            "description": t.description,
            "hosts": list(t.hosts),
        }
        for t in state.templates.load_all()
    ]
    return JSONResponse(content={"templates": templates, "count": len(templates)})
