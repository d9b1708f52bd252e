"""Badge router -- embeddable SVG status badge."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from toolindex.badge import render_badge
from toolindex.registry.local_registry import LocalRegistry
from toolindex.verify.origin import InvalidOriginError

from web.backend.app.routers.registry import get_registry

router = APIRouter(tags=["badge"])


@router.get("/badge", summary="Status badge")
def badge(
    origin: Optional[str] = Query(None, description="Origin to render"),
    reg: LocalRegistry = Depends(get_registry),
):
    """Render the recorded status of an origin as an SVG badge."""
    if not origin:
        raise HTTPException(status_code=400, detail="Missing `origin` query parameter")
    try:
        status = reg.status(origin)
    except InvalidOriginError:
        raise HTTPException(status_code=400, detail="Invalid origin")

    return Response(
        content=render_badge(status),
        media_type="image/svg+xml;charset=utf-8",
        headers={
            "Cache-Control": "public, max-age=300, s-maxage=300",
            "Access-Control-Allow-Origin": "*",
            "Cross-Origin-Resource-Policy": "cross-origin",
        },
    )
