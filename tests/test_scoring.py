"""Tests for trust scoring, relevance scoring, and ranking."""

from datetime import datetime, timedelta, timezone

from toolindex.scoring import (
    CheckInfo,
    OriginInfo,
    SearchPreferences,
    ToolCandidate,
    ToolInfo,
    combined_score,
    rank,
    ranking_score,
    relevance_score,
    score_tools,
    trust_score,
)
from toolindex.scoring.models import round_half_up

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _origin(**overrides) -> OriginInfo:
    values = {
        "status": "verified",
        "attested": True,
        "tool_count": 5,
        "last_checked": NOW,
        "first_seen": NOW - timedelta(days=200),
    }
    values.update(overrides)
    return OriginInfo(**values)


def _tool(**overrides) -> ToolInfo:
    values = {
        "name": "search_docs",
        "description": "Search the documentation index",
        "tags": ["docs", "search"],
        "risk_level": "low",
        "pricing_model": None,
    }
    values.update(overrides)
    return ToolInfo(**values)


# --- Trust ---


def test_trust_reference_scenario():
    checks = [CheckInfo(ok=True, latency_ms=300)] * 9 + [CheckInfo(ok=False, latency_ms=5000)]
    result = trust_score(_origin(), checks, now=NOW)
    b = result.breakdown
    assert b.verified == 30
    assert b.attested == 10
    assert b.uptime == 23
    assert b.latency == 14
    assert b.tool_count == 10
    assert b.freshness == 5
    assert b.longevity == 5
    assert result.total == 97


def test_trust_no_checks():
    result = trust_score(_origin(), [], now=NOW)
    assert result.breakdown.uptime == 0
    assert result.breakdown.latency == 0


def test_trust_no_ok_checks_zero_latency():
    result = trust_score(_origin(), [CheckInfo(ok=False, latency_ms=10)] * 3, now=NOW)
    assert result.breakdown.uptime == 0
    assert result.breakdown.latency == 0


def test_trust_slow_latency_floors_at_zero():
    result = trust_score(_origin(), [CheckInfo(ok=True, latency_ms=4500)], now=NOW)
    assert result.breakdown.latency == 0
    assert result.breakdown.uptime == 25


def test_trust_status_points():
    assert trust_score(_origin(status="verified"), [], now=NOW).breakdown.verified == 30
    assert trust_score(_origin(status="stale"), [], now=NOW).breakdown.verified == 10
    assert trust_score(_origin(status="invalid"), [], now=NOW).breakdown.verified == 0
    assert trust_score(_origin(status="unknown"), [], now=NOW).breakdown.verified == 0


def test_trust_tool_count_capped():
    assert trust_score(_origin(tool_count=2), [], now=NOW).breakdown.tool_count == 4
    assert trust_score(_origin(tool_count=40), [], now=NOW).breakdown.tool_count == 10
    assert trust_score(_origin(tool_count=0), [], now=NOW).breakdown.tool_count == 0


def test_trust_freshness_windows():
    def freshness(hours):
        origin = _origin(last_checked=NOW - timedelta(hours=hours))
        return trust_score(origin, [], now=NOW).breakdown.freshness

    assert freshness(1) == 5
    assert freshness(30) == 3
    assert freshness(80) == 0


def test_trust_longevity_ramp():
    def longevity(days):
        origin = _origin(first_seen=NOW - timedelta(days=days))
        return trust_score(origin, [], now=NOW).breakdown.longevity

    assert longevity(0) == 0
    assert longevity(90) == 3  # 2.5 rounds half up
    assert longevity(180) == 5
    assert longevity(1000) == 5


def test_trust_accepts_iso_strings_and_missing_times():
    origin = _origin(
        last_checked=(NOW - timedelta(hours=2)).isoformat(),
        first_seen="2025-12-03T12:00:00Z",
    )
    b = trust_score(origin, [], now=NOW).breakdown
    assert b.freshness == 5
    assert b.longevity == 5

    b = trust_score(_origin(last_checked=None, first_seen="garbage"), [], now=NOW).breakdown
    assert b.freshness == 0
    assert b.longevity == 0


def test_trust_total_within_bounds():
    windows = [
        [],
        [CheckInfo(ok=True, latency_ms=0)] * 100,
        [CheckInfo(ok=False, latency_ms=0)] * 50,
        [CheckInfo(ok=True, latency_ms=10_000), CheckInfo(ok=False, latency_ms=1)],
    ]
    for checks in windows:
        for origin in (_origin(), _origin(status="invalid", attested=False, tool_count=0)):
            total = trust_score(origin, checks, now=NOW).total
            assert 0 <= total <= 100


def test_trust_only_newest_window_counts():
    checks = [CheckInfo(ok=True, latency_ms=0)] * 100 + [CheckInfo(ok=False, latency_ms=0)] * 100
    assert trust_score(_origin(), checks, now=NOW).breakdown.uptime == 25


def test_trust_idempotent():
    checks = [CheckInfo(ok=True, latency_ms=120), CheckInfo(ok=False, latency_ms=0)]
    assert trust_score(_origin(), checks, now=NOW) == trust_score(_origin(), checks, now=NOW)


def test_trust_breakdown_keys_always_present():
    result = trust_score(_origin(status="invalid", attested=False, tool_count=0), [], now=NOW)
    assert set(result.breakdown.to_dict()) == {
        "verified",
        "attested",
        "uptime",
        "latency",
        "tool_count",
        "freshness",
        "longevity",
    }


# --- Relevance ---


def test_relevance_empty_query_is_zero():
    for query in ("", "   "):
        result = relevance_score(_tool(), query, SearchPreferences(risk="low", pricing="free"))
        assert result.total == 0
        assert all(v == 0 for v in result.breakdown.to_dict().values())


def test_name_match_priority():
    exact = relevance_score(_tool(name="search_docs"), "search_docs").breakdown.name_match
    prefix = relevance_score(_tool(name="search_docs_v2"), "search_docs").breakdown.name_match
    substring = relevance_score(_tool(name="fast_search_docs"), "search_docs").breakdown.name_match
    none = relevance_score(_tool(name="weather"), "search_docs").breakdown.name_match
    assert (exact, prefix, substring, none) == (30, 25, 15, 0)


def test_description_match():
    tool = _tool(description="Search the documentation index")
    assert relevance_score(tool, "search the documentation index").breakdown.description_match == 40
    # 20 + round(20 * 13 / 30)
    assert relevance_score(tool, "documentation").breakdown.description_match == 29
    assert relevance_score(tool, "weather").breakdown.description_match == 0


def test_query_normalized():
    upper = relevance_score(_tool(), "  SEARCH_DOCS ")
    lower = relevance_score(_tool(), "search_docs")
    assert upper == lower


def test_tag_match_case_insensitive():
    tool = _tool(tags=["Docs", "Knowledge-Base"])
    assert relevance_score(tool, "docs").breakdown.tag_match == 20
    assert relevance_score(tool, "knowledge").breakdown.tag_match == 10
    assert relevance_score(tool, "docs search").breakdown.tag_match == 10
    assert relevance_score(tool, "weather").breakdown.tag_match == 0


def test_tags_from_json_string():
    assert relevance_score(_tool(tags='["Docs"]'), "docs").breakdown.tag_match == 20


def test_malformed_tags_are_empty():
    for tags in ("not json", '{"a": 1}', None, 42, '["ok", 3]'):
        result = relevance_score(_tool(tags=tags), "zzz")
        assert result.breakdown.tag_match == 0


def test_risk_bonus():
    tool = _tool(risk_level="medium")
    assert relevance_score(tool, "docs", SearchPreferences(risk="medium")).breakdown.risk_bonus == 5
    assert relevance_score(tool, "docs", SearchPreferences(risk="low")).breakdown.risk_bonus == 0
    assert relevance_score(tool, "docs").breakdown.risk_bonus == 0


def test_pricing_bonus():
    paid = _tool(pricing_model="per_call")
    unpriced = _tool(pricing_model=None)
    assert relevance_score(paid, "docs", SearchPreferences(pricing="per_call")).breakdown.pricing_bonus == 5
    assert relevance_score(paid, "docs", SearchPreferences(pricing="free")).breakdown.pricing_bonus == 0
    assert relevance_score(unpriced, "docs", SearchPreferences(pricing="free")).breakdown.pricing_bonus == 5
    assert relevance_score(unpriced, "docs", SearchPreferences(pricing="per_call")).breakdown.pricing_bonus == 0


def test_relevance_total_capped():
    tool = _tool(name="docs", description="docs", tags=["docs"], risk_level="low", pricing_model="free")
    result = relevance_score(tool, "docs", SearchPreferences(risk="low", pricing="free"))
    assert result.total == 100


# --- Ranking ---


def test_combined_score_weights():
    assert combined_score(100, 0) == 60
    assert combined_score(0, 100) == 40
    assert combined_score(50, 97) == 69  # 30 + 38.8


def test_combined_score_monotonic():
    for r in range(0, 101, 5):
        for t in range(0, 101, 5):
            assert combined_score(r + 1, t) >= combined_score(r, t)
            assert combined_score(r, t + 1) >= combined_score(r, t)


def test_ranking_score_browse_mode():
    assert ranking_score(80, 40, "") == 40
    assert ranking_score(80, 40, "   ") == 40
    assert ranking_score(80, 40, "q") == combined_score(80, 40)


class _Entry:
    def __init__(self, name, score):
        self.name = name
        self.score = score


def test_rank_descending_and_stable():
    entries = [_Entry("a", 10), _Entry("b", 50), _Entry("c", 10), _Entry("d", 50)]
    assert [e.name for e in rank(entries)] == ["b", "d", "a", "c"]


def test_rank_truncates_after_sorting():
    entries = [_Entry(str(i), i) for i in range(10)]
    assert [e.score for e in rank(entries, limit=3)] == [9, 8, 7]


def test_score_tools_orders_by_combined_score():
    strong = _origin()
    weak = _origin(status="invalid", attested=False, tool_count=1)
    candidates = [
        ToolCandidate(tool=_tool(name="fast_search_docs"), origin=weak, payload="weak"),
        ToolCandidate(tool=_tool(name="search_docs"), origin=strong, payload="strong"),
    ]
    ranked = score_tools(candidates, "search_docs", now=NOW)
    assert [r.candidate.payload for r in ranked] == ["strong", "weak"]
    assert ranked[0].score == combined_score(ranked[0].relevance.total, ranked[0].trust.total)


def test_score_tools_browse_mode_uses_trust():
    candidates = [
        ToolCandidate(tool=_tool(), origin=_origin(status="stale"), payload="stale"),
        ToolCandidate(tool=_tool(), origin=_origin(), payload="verified"),
    ]
    ranked = score_tools(candidates, "", now=NOW, limit=1)
    assert len(ranked) == 1
    assert ranked[0].candidate.payload == "verified"
    assert ranked[0].score == ranked[0].trust.total


def test_round_half_up():
    assert round_half_up(22.5) == 23
    assert round_half_up(13.5) == 14
    assert round_half_up(2.4) == 2


def test_empty_tag_is_contained_in_any_query():
    tool = _tool(name="zzz", description="nothing", tags=["", "docs"])
    assert relevance_score(tool, "weather").breakdown.tag_match == 10
