"""Trust scorer -- health and reputation signal for an origin.

Seven fixed components, caps summing to 100:

    verified   30   status verified=30, stale=10, else 0
    attested   10   manifest carries an attestation
    uptime     25   share of ok checks in the window
    latency    15   linear on mean ok latency, 0ms=15, >=3000ms=0
    tool_count 10   2 points per tool
    freshness   5   last check <24h=5, <72h=3
    longevity   5   linear ramp over the first 180 days

Time-based components depend on ``now``; scores are never cached.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType

from toolindex.scoring.models import (
    CheckInfo,
    OriginInfo,
    TrustBreakdown,
    TrustScore,
    round_half_up,
)

MAX_CHECK_WINDOW = 100
LATENCY_CEILING_MS = 3000
LONGEVITY_RAMP_DAYS = 180

STATUS_POINTS = MappingProxyType({"verified": 30, "stale": 10})


def trust_score(
    origin: OriginInfo,
    checks: list[CheckInfo],
    now: datetime | None = None,
) -> TrustScore:
    """Compute the trust score for an origin.

    Args:
        origin: Static metadata for the origin.
        checks: Historical checks, newest first. Only the newest
            ``MAX_CHECK_WINDOW`` are considered.
        now: Reference time. Defaults to the current UTC time.
    """
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    window = list(checks)[:MAX_CHECK_WINDOW]

    breakdown = TrustBreakdown(
        verified=STATUS_POINTS.get(_status_value(origin.status), 0),
        attested=10 if origin.attested else 0,
        uptime=_uptime(window),
        latency=_latency(window),
        tool_count=min(10, max(0, origin.tool_count) * 2),
        freshness=_freshness(origin.last_checked, now),
        longevity=_longevity(origin.first_seen, now),
    )
    return TrustScore(breakdown=breakdown)


def _uptime(checks: list[CheckInfo]) -> int:
    if not checks:
        return 0
    ok_count = sum(1 for c in checks if c.ok)
    return round_half_up(25 * ok_count / len(checks))


def _latency(checks: list[CheckInfo]) -> int:
    ok_checks = [c for c in checks if c.ok]
    if not ok_checks:
        return 0
    avg = sum(c.latency_ms for c in ok_checks) / len(ok_checks)
    return round_half_up(max(0.0, 15 * (1 - avg / LATENCY_CEILING_MS)))


def _freshness(last_checked, now: datetime) -> int:
    checked_at = parse_timestamp(last_checked)
    if checked_at is None:
        return 0
    hours = (now - checked_at).total_seconds() / 3600
    if hours < 24:
        return 5
    if hours < 72:
        return 3
    return 0


def _longevity(first_seen, now: datetime) -> int:
    seen_at = parse_timestamp(first_seen)
    if seen_at is None:
        return 0
    days = (now - seen_at).total_seconds() / 86400
    return max(0, round_half_up(min(5.0, (days / LONGEVITY_RAMP_DAYS) * 5)))


def _status_value(status) -> str:
    return getattr(status, "value", status)


def parse_timestamp(value) -> datetime | None:
    """Accept a datetime or ISO 8601 string. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, str) and value:
        try:
            return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
