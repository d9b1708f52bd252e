"""Local file-based registry implementation.

A simple, file-system-backed registry for development and single-host use.
Origin records live in one JSON index; checks are appended to per-origin
history files. Scoring is always recomputed from the stored data, never
persisted.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import httpx

from toolindex.registry.check_history import CheckHistoryStore
from toolindex.registry.models import (
    CheckRecord,
    ChecksSummary,
    OriginDetail,
    OriginRecord,
    Submission,
    ToolRecord,
)
from toolindex.scoring import (
    RankedTool,
    SearchPreferences,
    ToolCandidate,
    score_tools,
    trust_score,
)
from toolindex.scoring.models import round_half_up
from toolindex.scoring.relevance import parse_tags
from toolindex.scoring.trust import MAX_CHECK_WINDOW
from toolindex.verify.models import OriginStatus
from toolindex.verify.origin import normalize_origin
from toolindex.verify.verifier import DEFAULT_TIMEOUT, verify

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_DIR = os.environ.get("TOOLINDEX_REGISTRY_DIR", ".toolindex_registry")
DEFAULT_SEARCH_LIMIT = 20
MAX_SEARCH_LIMIT = 100
BROWSE_LIMIT = 50

# Serializes read-modify-write of index files within one process
_INDEX_LOCK = threading.Lock()


class LocalRegistry:
    """File-based local registry of verified origins."""

    INDEX_FILE = "index.json"
    CHECKS_DIR = "checks"

    def __init__(
        self,
        registry_dir: str | Path = DEFAULT_REGISTRY_DIR,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], datetime] | None = None,
    ):
        self.registry_dir = Path(registry_dir)
        self.registry_dir.mkdir(parents=True, exist_ok=True)
        self.index_path = self.registry_dir / self.INDEX_FILE
        self.checks = CheckHistoryStore(self.registry_dir / self.CHECKS_DIR)
        self.client = client
        self.timeout = timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._index: dict[str, dict] = self._load_index()

    # ── Submission ───────────────────────────────────────────────────

    def submit(self, raw_origin: str) -> Submission:
        """Verify an origin and record the outcome.

        Raises:
            InvalidOriginError: if the origin cannot be parsed.
        """
        origin = normalize_origin(raw_origin)
        result = verify(origin, client=self.client, timeout=self.timeout)
        now = self._clock().isoformat()

        with _INDEX_LOCK:
            # Another registry instance may have written since we loaded
            self._index = self._load_index()
            record = self.get_origin(origin) or OriginRecord(origin=origin, first_seen=now)
            record.status = result.status
            record.last_checked = now
            record.last_error = result.error

            if result.manifest is not None:
                manifest = result.manifest
                record.attested = manifest.attested
                record.requires_auth = manifest.auth.requires_login
                record.manifest = manifest.to_dict()
                record.tools = [ToolRecord.from_tool(t) for t in manifest.tools]

            self._index[origin] = _record_to_dict(record)
            self._save_index()
            self.checks.append(
                origin,
                CheckRecord(
                    ok=result.status != OriginStatus.INVALID,
                    latency_ms=result.latency_ms,
                    error=result.error,
                    checked_at=now,
                ),
            )

        logger.info("Recorded %s as %s", origin, record.status.value)
        tool_count = record.tool_count if result.manifest is not None else 0
        return Submission(
            origin=origin,
            status=result.status,
            tool_count=tool_count,
            errors=result.error_messages(),
        )

    # ── Lookup ───────────────────────────────────────────────────────

    def get_origin(self, raw_origin: str) -> OriginRecord | None:
        data = self._index.get(normalize_origin(raw_origin))
        return _dict_to_record(data) if data else None

    def status(self, raw_origin: str) -> OriginStatus:
        """Current status, ``unknown`` for origins never submitted."""
        record = self.get_origin(raw_origin)
        return record.status if record else OriginStatus.UNKNOWN

    def recent_checks(self, raw_origin: str, limit: int = MAX_CHECK_WINDOW) -> list[CheckRecord]:
        return self.checks.recent(normalize_origin(raw_origin), limit=limit)

    def origin_detail(self, raw_origin: str, now: datetime | None = None) -> OriginDetail | None:
        """Origin record with trust score and a summary of its recent checks."""
        record = self.get_origin(raw_origin)
        if record is None:
            return None

        checks = self.checks.recent(record.origin, limit=MAX_CHECK_WINDOW)
        ok_checks = [c for c in checks if c.ok]
        summary = ChecksSummary(total=len(checks), ok=len(ok_checks))
        if checks:
            summary.uptime_percent = round_half_up(len(ok_checks) / len(checks) * 100)
        if ok_checks:
            summary.avg_latency_ms = round_half_up(sum(c.latency_ms for c in ok_checks) / len(ok_checks))

        trust = trust_score(
            record.to_origin_info(),
            [c.to_check_info() for c in checks],
            now=now or self._clock(),
        )
        return OriginDetail(record=record, trust=trust, checks_summary=summary)

    def list_all(self) -> list[OriginRecord]:
        return [_dict_to_record(d) for d in self._index.values()]

    # ── Search ───────────────────────────────────────────────────────

    def search_origins(self, query: str = "") -> list[OriginRecord]:
        """Find origins by origin substring, tool name, or tag.

        With an empty query, returns the most recently checked origins.
        """
        q = (query or "").strip().lower()
        records = self.list_all()

        if not q:
            records.sort(key=lambda r: r.last_checked, reverse=True)
            return records[:BROWSE_LIMIT]

        by_origin = [r for r in records if q in r.origin.lower()]
        by_tool = [
            r
            for r in records
            if any(
                q in t.name.lower() or any(q in tag.lower() for tag in parse_tags(t.tags))
                for t in r.tools
            )
        ]

        seen: set[str] = set()
        results = []
        for record in by_origin + by_tool:
            if record.origin not in seen:
                seen.add(record.origin)
                results.append(record)
        return results

    def search_tools(
        self,
        query: str = "",
        risk: str | None = None,
        pricing: str | None = None,
        auth: bool | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        now: datetime | None = None,
    ) -> list[RankedTool]:
        """Filter tools, score them, and return the ranked top ``limit``.

        Candidate payloads are ``(OriginRecord, ToolRecord)`` pairs.
        """
        q = (query or "").strip()
        limit = min(MAX_SEARCH_LIMIT, max(1, limit))

        candidates = []
        for record in self.list_all():
            if auth is not None and record.requires_auth != auth:
                continue

            checks = None
            for tool in record.tools:
                if not _matches_filters(tool, q.lower(), risk, pricing):
                    continue
                if checks is None:
                    checks = [
                        c.to_check_info()
                        for c in self.checks.recent(record.origin, limit=MAX_CHECK_WINDOW)
                    ]
                candidates.append(
                    ToolCandidate(
                        tool=tool.to_tool_info(),
                        origin=record.to_origin_info(),
                        checks=checks,
                        payload=(record, tool),
                    )
                )

        return score_tools(
            candidates,
            q,
            SearchPreferences(risk=risk, pricing=pricing),
            now=now or self._clock(),
            limit=limit,
        )

    def _load_index(self) -> dict[str, dict]:
        if self.index_path.exists():
            with open(self.index_path) as f:
                return json.load(f)
        return {}

    def _save_index(self):
        tmp_path = self.index_path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(self._index, f, indent=2)
        os.replace(tmp_path, self.index_path)


def _matches_filters(tool: ToolRecord, q: str, risk: str | None, pricing: str | None) -> bool:
    if q:
        haystacks = [tool.name.lower(), tool.description.lower()]
        haystacks.extend(t.lower() for t in parse_tags(tool.tags))
        if not any(q in h for h in haystacks):
            return False

    if risk and tool.risk_level != risk:
        return False

    if pricing:
        # "free" also covers tools that declare no pricing at all
        if pricing == "free":
            if tool.pricing_model not in (None, "free"):
                return False
        elif tool.pricing_model != pricing:
            return False

    return True


def _record_to_dict(record: OriginRecord) -> dict:
    return {
        "origin": record.origin,
        "status": record.status.value,
        "attested": record.attested,
        "requires_auth": record.requires_auth,
        "first_seen": record.first_seen,
        "last_checked": record.last_checked,
        "last_error": record.last_error,
        "manifest": record.manifest,
        "tools": [
            {
                "name": t.name,
                "description": t.description,
                "version": t.version,
                "tags": t.tags,
                "risk_level": t.risk_level,
                "requires_user_confirm": t.requires_user_confirm,
                "pricing_model": t.pricing_model,
                "pricing_price_usd": t.pricing_price_usd,
            }
            for t in record.tools
        ],
    }


def _dict_to_record(data: dict) -> OriginRecord:
    try:
        status = OriginStatus(data.get("status", "unknown"))
    except ValueError:
        status = OriginStatus.UNKNOWN
    return OriginRecord(
        origin=data["origin"],
        status=status,
        attested=data.get("attested", False),
        requires_auth=data.get("requires_auth", False),
        first_seen=data.get("first_seen", ""),
        last_checked=data.get("last_checked", ""),
        last_error=data.get("last_error"),
        manifest=data.get("manifest"),
        tools=[
            ToolRecord(
                name=t["name"],
                description=t.get("description", ""),
                version=t.get("version", ""),
                tags=t.get("tags", []),
                risk_level=t.get("risk_level", ""),
                requires_user_confirm=t.get("requires_user_confirm", False),
                pricing_model=t.get("pricing_model"),
                pricing_price_usd=t.get("pricing_price_usd"),
            )
            for t in data.get("tools", [])
        ],
    )
