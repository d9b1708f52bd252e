"""Verifier — fetch a manifest and classify the origin.

Classification is a total function over (fetch outcome, payload shape):

    transport failure / non-2xx  -> invalid
    body is not JSON             -> invalid
    schema violations            -> invalid
    unsupported manifest_version -> stale (manifest still attached)
    otherwise                    -> verified

There is no retry here. A timeout is a transport failure like any other;
callers that want backoff re-run ``verify`` over time.
"""

from __future__ import annotations

import json
import logging
import os
import time

import httpx

from toolindex.spec import MANIFEST_VERSION, WELL_KNOWN_PATH
from toolindex.spec.schema_validator import validate_manifest
from toolindex.verify.models import FetchOutcome, OriginStatus, VerificationResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = float(os.environ.get("TOOLINDEX_FETCH_TIMEOUT", "10"))


def manifest_url(origin: str) -> str:
    """Return the well-known manifest URL for an origin."""
    return f"{origin.rstrip('/')}{WELL_KNOWN_PATH}"


def fetch_manifest(
    url: str,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> FetchOutcome:
    """Perform one GET with a bounded wait. Never raises for network errors."""
    start = time.monotonic()
    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    try:
        resp = client.get(url, headers={"Accept": "application/json"}, timeout=timeout)
        return FetchOutcome(
            status_code=resp.status_code,
            body=resp.text,
            latency_ms=_elapsed_ms(start),
        )
    except httpx.TimeoutException:
        logger.warning("Timed out after %.1fs fetching %s", timeout, url)
        return FetchOutcome(error=f"Timed out fetching {url}", latency_ms=_elapsed_ms(start))
    except httpx.HTTPError as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        return FetchOutcome(error=f"Failed to fetch {url}: {exc}", latency_ms=_elapsed_ms(start))
    finally:
        if owns_client:
            client.close()


def classify(outcome: FetchOutcome, url: str = "") -> VerificationResult:
    """Map a fetch outcome to exactly one verification status."""
    source = url or "manifest endpoint"
    latency = outcome.latency_ms

    if outcome.error is not None or outcome.status_code is None:
        return VerificationResult(
            status=OriginStatus.INVALID,
            error=outcome.error or f"Failed to fetch {source}",
            latency_ms=latency,
        )

    if not outcome.ok:
        return VerificationResult(
            status=OriginStatus.INVALID,
            error=f"HTTP {outcome.status_code} from {source}",
            latency_ms=latency,
        )

    try:
        data = json.loads(outcome.body)
    except (json.JSONDecodeError, TypeError, RecursionError):
        return VerificationResult(
            status=OriginStatus.INVALID,
            error="Response is not valid JSON",
            latency_ms=latency,
        )

    validation = validate_manifest(data)
    if not validation.valid:
        return VerificationResult(
            status=OriginStatus.INVALID,
            error="; ".join(str(e) for e in validation.errors),
            errors=validation.errors,
            latency_ms=latency,
        )

    manifest = validation.manifest
    if manifest.manifest_version != MANIFEST_VERSION:
        return VerificationResult(
            status=OriginStatus.STALE,
            manifest=manifest,
            error=(
                f'Unsupported manifest_version "{manifest.manifest_version}", '
                f'expected "{MANIFEST_VERSION}"'
            ),
            latency_ms=latency,
        )

    return VerificationResult(status=OriginStatus.VERIFIED, manifest=manifest, latency_ms=latency)


def verify(
    origin: str,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> VerificationResult:
    """Fetch an origin's manifest and classify it."""
    url = manifest_url(origin)
    result = classify(fetch_manifest(url, client=client, timeout=timeout), url)
    logger.info("Verified %s: %s (%dms)", origin, result.status.value, result.latency_ms)
    return result


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
