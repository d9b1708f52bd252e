"""Ranker -- combine relevance and trust into one ordering.

With a query, relevance dominates (60/40). Without one (browse mode) the
ranking score is trust alone. Sorting is by descending score and stable on
exact ties, so equal entries keep their input order. Truncation to a limit
always happens after the full set is sorted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Sequence, TypeVar

from toolindex.scoring.models import (
    CheckInfo,
    OriginInfo,
    RelevanceScore,
    SearchPreferences,
    ToolInfo,
    TrustScore,
    round_half_up,
)
from toolindex.scoring.relevance import relevance_score
from toolindex.scoring.trust import trust_score

RELEVANCE_WEIGHT = 0.6
TRUST_WEIGHT = 0.4


@dataclass
class ToolCandidate:
    """A tool with the origin context needed to score it."""

    tool: ToolInfo
    origin: OriginInfo
    checks: list[CheckInfo] = field(default_factory=list)
    payload: Any = None  # Opaque caller data carried through to the result


@dataclass
class RankedTool:
    score: int
    trust: TrustScore
    relevance: RelevanceScore
    candidate: ToolCandidate


def combined_score(relevance: int, trust: int) -> int:
    """Weighted blend, monotonically non-decreasing in each argument."""
    return round_half_up(RELEVANCE_WEIGHT * relevance + TRUST_WEIGHT * trust)


def ranking_score(relevance: int, trust: int, query: str) -> int:
    """Score used for ordering: combined with a query, trust alone without."""
    if (query or "").strip():
        return combined_score(relevance, trust)
    return trust


T = TypeVar("T")


def rank(entries: Iterable[T], limit: int | None = None) -> list[T]:
    """Sort entries by descending ``score``, stable on ties, then truncate."""
    ordered = sorted(entries, key=lambda e: e.score, reverse=True)
    if limit is not None:
        return ordered[: max(0, limit)]
    return ordered


def score_tools(
    candidates: Sequence[ToolCandidate],
    query: str,
    prefs: SearchPreferences | None = None,
    now: datetime | None = None,
    limit: int | None = None,
) -> list[RankedTool]:
    """Score every candidate, then rank and truncate."""
    scored = []
    for candidate in candidates:
        trust = trust_score(candidate.origin, candidate.checks, now=now)
        relevance = relevance_score(candidate.tool, query, prefs)
        scored.append(
            RankedTool(
                score=ranking_score(relevance.total, trust.total, query),
                trust=trust,
                relevance=relevance,
                candidate=candidate,
            )
        )
    return rank(scored, limit=limit)
