"""Check history store -- persists verification attempts to disk.

Storage layout:
    <base_dir>/<origin>.json
Each file is a JSON array of CheckRecord dicts in append order.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path

from toolindex.registry.models import CheckRecord

logger = logging.getLogger(__name__)


class CheckHistoryStore:
    """Append-only check log, one file per origin."""

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _history_path(self, origin: str) -> Path:
        safe_name = origin.replace("://", "_").replace("/", "_").replace("\\", "_").replace(":", "_")
        return self.base_dir / f"{safe_name}.json"

    def append(self, origin: str, check: CheckRecord) -> CheckRecord:
        history = self._load(origin)
        history.append(asdict(check))
        self._save(origin, history)
        return check

    def recent(self, origin: str, limit: int = 100) -> list[CheckRecord]:
        """Return the newest ``limit`` checks, newest first."""
        entries = []
        for item in self._load(origin):
            try:
                entries.append(CheckRecord(**item))
            except TypeError:
                continue
        # Stable on equal timestamps, so append order breaks ties
        entries.reverse()
        entries.sort(key=lambda c: c.checked_at, reverse=True)
        return entries[:limit]

    def _load(self, origin: str) -> list[dict]:
        path = self._history_path(origin)
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                if isinstance(data, list):
                    return data
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Ignoring unreadable check history %s: %s", path, exc)
        return []

    def _save(self, origin: str, history: list[dict]):
        path = self._history_path(origin)
        with open(path, "w") as f:
            json.dump(history, f, indent=2)
