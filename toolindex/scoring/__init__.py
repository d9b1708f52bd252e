"""Scoring — trust, relevance, and the combined ranking signal.

All functions here are pure and synchronous: no I/O, no shared state.
The only time dependency is ``now``, which callers may pin for
reproducible results.
"""

from toolindex.scoring.models import (
    CheckInfo,
    OriginInfo,
    RelevanceBreakdown,
    RelevanceScore,
    SearchPreferences,
    ToolInfo,
    TrustBreakdown,
    TrustScore,
)
from toolindex.scoring.ranker import (
    RankedTool,
    ToolCandidate,
    combined_score,
    rank,
    ranking_score,
    score_tools,
)
from toolindex.scoring.relevance import relevance_score
from toolindex.scoring.trust import trust_score

__all__ = [
    "CheckInfo",
    "OriginInfo",
    "RankedTool",
    "RelevanceBreakdown",
    "RelevanceScore",
    "SearchPreferences",
    "ToolCandidate",
    "ToolInfo",
    "TrustBreakdown",
    "TrustScore",
    "combined_score",
    "rank",
    "ranking_score",
    "relevance_score",
    "score_tools",
    "trust_score",
]
