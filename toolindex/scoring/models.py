"""Scoring data models — inputs, fixed-field breakdowns, and results.

Every breakdown is a fixed set of named sub-criteria. All fields are always
present (zero when their rule does not apply) so breakdowns of different
entities can be compared field by field. The total is an explicit sum,
capped at 100.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime

SCORE_CAP = 100


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (builtin round() is banker's)."""
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass
class OriginInfo:
    """Static origin metadata consumed by the trust scorer."""

    status: str
    attested: bool = False
    requires_auth: bool = False
    first_seen: datetime | str | None = None
    last_checked: datetime | str | None = None
    tool_count: int = 0


@dataclass
class CheckInfo:
    ok: bool
    latency_ms: int = 0


@dataclass
class ToolInfo:
    """Searchable fields of a tool.

    ``tags`` may be a list of strings or the JSON-encoded form kept in storage.
    """

    name: str
    description: str = ""
    tags: list[str] | str = field(default_factory=list)
    risk_level: str = ""
    pricing_model: str | None = None


@dataclass
class SearchPreferences:
    """Optional caller preferences; each field is independently nullable."""

    risk: str | None = None
    pricing: str | None = None


# ---------------------------------------------------------------------------
# Breakdowns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrustBreakdown:
    verified: int = 0  # max 30
    attested: int = 0  # max 10
    uptime: int = 0  # max 25
    latency: int = 0  # max 15
    tool_count: int = 0  # max 10
    freshness: int = 0  # max 5
    longevity: int = 0  # max 5

    @property
    def total(self) -> int:
        return min(
            SCORE_CAP,
            self.verified
            + self.attested
            + self.uptime
            + self.latency
            + self.tool_count
            + self.freshness
            + self.longevity,
        )

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class RelevanceBreakdown:
    description_match: int = 0  # max 40
    name_match: int = 0  # max 30
    tag_match: int = 0  # max 20
    risk_bonus: int = 0  # max 5
    pricing_bonus: int = 0  # max 5

    @property
    def total(self) -> int:
        return min(
            SCORE_CAP,
            self.description_match
            + self.name_match
            + self.tag_match
            + self.risk_bonus
            + self.pricing_bonus,
        )

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrustScore:
    breakdown: TrustBreakdown

    @property
    def total(self) -> int:
        return self.breakdown.total


@dataclass(frozen=True)
class RelevanceScore:
    breakdown: RelevanceBreakdown

    @property
    def total(self) -> int:
        return self.breakdown.total
