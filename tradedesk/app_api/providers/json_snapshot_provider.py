"""JSON file-backed snapshot provider.

Responsibilities:
  - Load already-fetched domain records from a JSON document.
Must not:
  - Evaluate signals or postprocess items.
"""

from __future__ import annotations

import json
from pathlib import Path

from tradedesk.app_api.ports import SnapshotProvider
from tradedesk.core.evaluators.snapshot import DecisionSnapshot


class JsonSnapshotProvider(SnapshotProvider):
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def get_snapshot(self) -> DecisionSnapshot:
        if not self._path.exists():
            raise ValueError(f"Snapshot file not found: {self._path}")
        payload = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("Snapshot must be a JSON object")
        return DecisionSnapshot.from_payload(payload)


class StaticSnapshotProvider(SnapshotProvider):
    def __init__(self, snapshot: DecisionSnapshot) -> None:
        self._snapshot = snapshot

    def get_snapshot(self) -> DecisionSnapshot:
        return self._snapshot
