"""Registry data models — origin records, tools, checks, and search views."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from toolindex.scoring.models import CheckInfo, OriginInfo, ToolInfo, TrustScore
from toolindex.spec.manifest import Tool
from toolindex.verify.models import OriginStatus


@dataclass
class ToolRecord:
    """A tool as stored for an origin."""

    name: str
    description: str = ""
    version: str = ""
    tags: list[str] = field(default_factory=list)
    risk_level: str = ""
    requires_user_confirm: bool = False
    pricing_model: str | None = None
    pricing_price_usd: float | None = None

    @classmethod
    def from_tool(cls, tool: Tool) -> ToolRecord:
        return cls(
            name=tool.name,
            description=tool.description,
            version=tool.version,
            tags=list(tool.tags),
            risk_level=tool.risk_level,
            requires_user_confirm=tool.requires_user_confirm,
            pricing_model=tool.pricing_model,
            pricing_price_usd=tool.pricing.price_usd if tool.pricing else None,
        )

    def to_tool_info(self) -> ToolInfo:
        return ToolInfo(
            name=self.name,
            description=self.description,
            tags=self.tags,
            risk_level=self.risk_level,
            pricing_model=self.pricing_model,
        )


@dataclass
class CheckRecord:
    """One verification attempt. Append-only."""

    ok: bool
    latency_ms: int = 0
    error: str | None = None
    checked_at: str = ""  # ISO 8601

    def to_check_info(self) -> CheckInfo:
        return CheckInfo(ok=self.ok, latency_ms=self.latency_ms)


@dataclass
class OriginRecord:
    """Registry state for one origin. Never deleted by the registry."""

    origin: str
    status: OriginStatus = OriginStatus.UNKNOWN
    attested: bool = False
    requires_auth: bool = False
    first_seen: str = ""  # ISO 8601
    last_checked: str = ""  # ISO 8601
    last_error: str | None = None
    manifest: dict[str, Any] | None = None
    tools: list[ToolRecord] = field(default_factory=list)

    @property
    def tool_count(self) -> int:
        return len(self.tools)

    @property
    def top_tools(self) -> list[str]:
        return [t.name for t in self.tools[:3]]

    def to_origin_info(self) -> OriginInfo:
        return OriginInfo(
            status=self.status.value,
            attested=self.attested,
            requires_auth=self.requires_auth,
            first_seen=self.first_seen,
            last_checked=self.last_checked,
            tool_count=self.tool_count,
        )


@dataclass
class Submission:
    """Outcome of submitting an origin for verification."""

    origin: str
    status: OriginStatus
    tool_count: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class ChecksSummary:
    total: int = 0
    ok: int = 0
    uptime_percent: int | None = None
    avg_latency_ms: int | None = None


@dataclass
class OriginDetail:
    """An origin record annotated with its current trust score."""

    record: OriginRecord
    trust: TrustScore
    checks_summary: ChecksSummary = field(default_factory=ChecksSummary)
