"""Relevance scorer -- how well a tool matches a free-text query.

The query is lower-cased and trimmed before every comparison. An empty
query scores zero on every text component and zero overall.
"""

from __future__ import annotations

import json

from toolindex.scoring.models import (
    RelevanceBreakdown,
    RelevanceScore,
    SearchPreferences,
    ToolInfo,
    round_half_up,
)


def relevance_score(
    tool: ToolInfo,
    query: str,
    prefs: SearchPreferences | None = None,
) -> RelevanceScore:
    """Compute the relevance score of a tool for a query."""
    q = (query or "").strip().lower()
    if not q:
        return RelevanceScore(breakdown=RelevanceBreakdown())

    prefs = prefs or SearchPreferences()
    breakdown = RelevanceBreakdown(
        description_match=_description_match(tool.description or "", q),
        name_match=_name_match(tool.name or "", q),
        tag_match=_tag_match(parse_tags(tool.tags), q),
        risk_bonus=5 if prefs.risk and tool.risk_level == prefs.risk else 0,
        pricing_bonus=_pricing_bonus(tool.pricing_model, prefs.pricing),
    )
    return RelevanceScore(breakdown=breakdown)


def _description_match(description: str, q: str) -> int:
    desc = description.lower()
    if desc == q:
        return 40
    if q in desc:
        # Partial match: 20 base plus up to 20 for coverage
        return 20 + round_half_up(20 * len(q) / len(desc))
    return 0


def _name_match(name: str, q: str) -> int:
    name = name.lower()
    if name == q:
        return 30
    if name.startswith(q):
        return 25
    if q in name:
        return 15
    return 0


def _tag_match(tags: list[str], q: str) -> int:
    lowered = [t.lower() for t in tags]
    if any(t == q for t in lowered):
        return 20
    if any(q in t or t in q for t in lowered):
        return 10
    return 0


def _pricing_bonus(pricing_model: str | None, wanted: str | None) -> int:
    if not wanted:
        return 0
    if pricing_model and pricing_model == wanted:
        return 5
    if wanted == "free" and not pricing_model:
        return 5
    return 0


def parse_tags(tags) -> list[str]:
    """Normalize stored tags to a list of strings.

    Accepts a list/tuple or its JSON-encoded form. Anything malformed is
    treated as having no tags.
    """
    if isinstance(tags, str):
        try:
            tags = json.loads(tags)
        except ValueError:
            return []
    if not isinstance(tags, (list, tuple)):
        return []
    return [t for t in tags if isinstance(t, str)]
