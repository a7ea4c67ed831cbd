"""Port definitions for the decision engine app layer.

Responsibilities:
  - Define the snapshot provider contract consumed by the facade.
Must not:
  - Implement logic; interfaces only.
"""

from __future__ import annotations

from typing import Protocol

from tradedesk.core.evaluators.snapshot import DecisionSnapshot


class SnapshotProvider(Protocol):
    def get_snapshot(self) -> DecisionSnapshot:
        ...
