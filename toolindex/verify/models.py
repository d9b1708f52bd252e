"""Verification data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from toolindex.spec.manifest import Manifest
from toolindex.spec.schema_validator import ValidationError


class OriginStatus(str, Enum):
    VERIFIED = "verified"
    INVALID = "invalid"
    STALE = "stale"
    UNKNOWN = "unknown"  # Never checked; the verifier itself never emits it


@dataclass
class FetchOutcome:
    """What the I/O layer observed when requesting a manifest."""

    status_code: int | None = None  # None when no response was received
    body: str = ""
    error: str | None = None  # Transport failure message
    latency_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


@dataclass
class VerificationResult:
    """Verdict for one verification attempt."""

    status: OriginStatus
    manifest: Manifest | None = None
    error: str | None = None
    errors: list[ValidationError] = field(default_factory=list)
    latency_ms: int = 0

    @property
    def is_verified(self) -> bool:
        return self.status == OriginStatus.VERIFIED

    def error_messages(self) -> list[str]:
        """Structural errors as strings, or the single transport/version error."""
        if self.errors:
            return [str(e) for e in self.errors]
        return [self.error] if self.error else []
