"""Registry router -- submission, status, detail, and search for origins."""

from __future__ import annotations

import os
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from toolindex.registry.local_registry import DEFAULT_REGISTRY_DIR, LocalRegistry
from toolindex.registry.models import OriginRecord, ToolRecord
from toolindex.scoring import RankedTool
from toolindex.verify.origin import InvalidOriginError, normalize_origin

from web.backend.app.models.api import (
    ChecksSummaryResponse,
    OriginDetailResponse,
    OriginSummaryResponse,
    RankedOriginResponse,
    RankedToolResponse,
    RelevanceBreakdownResponse,
    RelevanceScoreResponse,
    SubmitRequest,
    SubmitResponse,
    ToolResponse,
    TrustBreakdownResponse,
    TrustScoreResponse,
    VerifyStatusResponse,
)

router = APIRouter(tags=["registry"])

REGISTRY_DIR = os.environ.get("TOOLINDEX_REGISTRY_DIR", DEFAULT_REGISTRY_DIR)


def get_registry() -> LocalRegistry:
    """Return a LocalRegistry instance for the configured directory."""
    return LocalRegistry(REGISTRY_DIR)


def _normalize_or_400(raw: str) -> str:
    try:
        return normalize_origin(raw)
    except InvalidOriginError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _tool_to_response(tool: ToolRecord) -> ToolResponse:
    return ToolResponse(**asdict(tool))


def _origin_to_summary(record: OriginRecord) -> OriginSummaryResponse:
    return OriginSummaryResponse(
        origin=record.origin,
        status=record.status.value,
        tool_count=record.tool_count,
        top_tools=record.top_tools,
    )


def _ranked_to_response(ranked: RankedTool) -> RankedToolResponse:
    record, tool = ranked.candidate.payload
    return RankedToolResponse(
        score=ranked.score,
        trust=TrustScoreResponse(
            total=ranked.trust.total,
            breakdown=TrustBreakdownResponse(**ranked.trust.breakdown.to_dict()),
        ),
        relevance=RelevanceScoreResponse(
            total=ranked.relevance.total,
            breakdown=RelevanceBreakdownResponse(**ranked.relevance.breakdown.to_dict()),
        ),
        tool=_tool_to_response(tool),
        origin=RankedOriginResponse(
            origin=record.origin,
            status=record.status.value,
            attested=record.attested,
            requires_auth=record.requires_auth,
            trust_score=ranked.trust.total,
        ),
    )


@router.post("/submit", response_model=SubmitResponse, summary="Submit an origin")
def submit_origin(request: SubmitRequest, reg: LocalRegistry = Depends(get_registry)):
    """Fetch, verify, and record an origin's manifest."""
    if not request.origin.strip():
        raise HTTPException(status_code=400, detail="Missing `origin` in request body")
    try:
        submission = reg.submit(request.origin)
    except InvalidOriginError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return SubmitResponse(
        origin=submission.origin,
        status=submission.status.value,
        tool_count=submission.tool_count,
        errors=submission.errors,
    )


@router.get("/search", response_model=list[OriginSummaryResponse], summary="Search origins")
def search_origins(
    q: Optional[str] = Query(None, description="Origin, tool name, or tag substring"),
    reg: LocalRegistry = Depends(get_registry),
):
    """Search origins. Without a query, lists the most recently checked."""
    return [_origin_to_summary(r) for r in reg.search_origins(q or "")]


@router.get("/tools/search", response_model=list[RankedToolResponse], summary="Ranked tool search")
def search_tools(
    q: Optional[str] = Query(None, description="Free-text query"),
    risk: Optional[str] = Query(None, description="Preferred risk level"),
    pricing: Optional[str] = Query(None, description="Preferred pricing model"),
    auth: Optional[bool] = Query(None, description="Filter on origins requiring login"),
    limit: int = Query(20, description="Maximum results (1-100)"),
    reg: LocalRegistry = Depends(get_registry),
):
    """Score and rank tools by relevance and origin trust."""
    ranked = reg.search_tools(q or "", risk=risk, pricing=pricing, auth=auth, limit=limit)
    return [_ranked_to_response(r) for r in ranked]


@router.get("/origin/{origin:path}", response_model=OriginDetailResponse, summary="Origin detail")
def get_origin(origin: str, reg: LocalRegistry = Depends(get_registry)):
    """Retrieve an origin with its trust breakdown and check summary."""
    _normalize_or_400(origin)
    detail = reg.origin_detail(origin)
    if detail is None:
        raise HTTPException(status_code=404, detail="Origin not found")

    record = detail.record
    return OriginDetailResponse(
        origin=record.origin,
        status=record.status.value,
        attested=record.attested,
        requires_auth=record.requires_auth,
        first_seen=record.first_seen,
        last_checked=record.last_checked,
        last_error=record.last_error,
        trust_score=detail.trust.total,
        trust_breakdown=TrustBreakdownResponse(**detail.trust.breakdown.to_dict()),
        checks_summary=ChecksSummaryResponse(**asdict(detail.checks_summary)),
        manifest=record.manifest,
        tools=[_tool_to_response(t) for t in record.tools],
    )


@router.get("/verify", response_model=VerifyStatusResponse, summary="Current status")
def verify_status(
    origin: Optional[str] = Query(None, description="Origin to look up"),
    reg: LocalRegistry = Depends(get_registry),
):
    """Return the recorded status of an origin, ``unknown`` if never submitted."""
    if not origin:
        raise HTTPException(status_code=400, detail="Missing `origin` query parameter")
    normalized = _normalize_or_400(origin)
    record = reg.get_origin(normalized)
    if record is None:
        return VerifyStatusResponse(origin=normalized, status="unknown")
    return VerifyStatusResponse(
        origin=record.origin,
        status=record.status.value,
        last_checked=record.last_checked or None,
        attested=record.attested,
    )
