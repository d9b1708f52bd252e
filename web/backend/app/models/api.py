"""Pydantic models for API request/response serialization.

These models mirror the toolindex dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Submission / status models
# ---------------------------------------------------------------------------


class SubmitRequest(BaseModel):
    origin: str


class SubmitResponse(BaseModel):
    """Mirrors toolindex.registry.models.Submission."""

    origin: str
    status: str
    tool_count: int = 0
    errors: list[str] = Field(default_factory=list)


class VerifyStatusResponse(BaseModel):
    origin: str
    status: str
    last_checked: Optional[str] = None
    attested: bool = False


# ---------------------------------------------------------------------------
# Score models
# ---------------------------------------------------------------------------


class TrustBreakdownResponse(BaseModel):
    """Mirrors toolindex.scoring.models.TrustBreakdown."""

    verified: int = 0
    attested: int = 0
    uptime: int = 0
    latency: int = 0
    tool_count: int = 0
    freshness: int = 0
    longevity: int = 0


class RelevanceBreakdownResponse(BaseModel):
    """Mirrors toolindex.scoring.models.RelevanceBreakdown."""

    description_match: int = 0
    name_match: int = 0
    tag_match: int = 0
    risk_bonus: int = 0
    pricing_bonus: int = 0


class TrustScoreResponse(BaseModel):
    total: int
    breakdown: TrustBreakdownResponse


class RelevanceScoreResponse(BaseModel):
    total: int
    breakdown: RelevanceBreakdownResponse


# ---------------------------------------------------------------------------
# Registry models
# ---------------------------------------------------------------------------


class ToolResponse(BaseModel):
    """Mirrors toolindex.registry.models.ToolRecord."""

    name: str
    description: str = ""
    version: str = ""
    tags: list[str] = Field(default_factory=list)
    risk_level: str = ""
    requires_user_confirm: bool = False
    pricing_model: Optional[str] = None
    pricing_price_usd: Optional[float] = None


class OriginSummaryResponse(BaseModel):
    origin: str
    status: str
    tool_count: int = 0
    top_tools: list[str] = Field(default_factory=list)


class RankedOriginResponse(BaseModel):
    origin: str
    status: str
    attested: bool = False
    requires_auth: bool = False
    trust_score: int = 0


class RankedToolResponse(BaseModel):
    """Mirrors toolindex.scoring.ranker.RankedTool."""

    score: int
    trust: TrustScoreResponse
    relevance: RelevanceScoreResponse
    tool: ToolResponse
    origin: RankedOriginResponse


class ChecksSummaryResponse(BaseModel):
    """Mirrors toolindex.registry.models.ChecksSummary."""

    total: int = 0
    ok: int = 0
    uptime_percent: Optional[int] = None
    avg_latency_ms: Optional[int] = None


class OriginDetailResponse(BaseModel):
    """Mirrors toolindex.registry.models.OriginDetail."""

    origin: str
    status: str
    attested: bool = False
    requires_auth: bool = False
    first_seen: str = ""
    last_checked: str = ""
    last_error: Optional[str] = None
    trust_score: int = 0
    trust_breakdown: TrustBreakdownResponse = Field(default_factory=TrustBreakdownResponse)
    checks_summary: ChecksSummaryResponse = Field(default_factory=ChecksSummaryResponse)
    manifest: Optional[dict[str, Any]] = None
    tools: list[ToolResponse] = Field(default_factory=list)
