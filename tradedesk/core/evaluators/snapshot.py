"""Input snapshot for evaluators.

Responsibilities:
  - Hold the already-fetched domain records one engine run evaluates.
  - Normalize an arbitrary payload into tuples of mappings.

Key definitions:
  - DecisionSnapshot: trade ideas, proposals, rating changes, thesis updates,
    projects (with nested deliverables), and assets.

Inputs/Outputs:
  - Inputs: a dict keyed by collection name (camelCase or snake_case).
  - Outputs: immutable container shared by every evaluator in a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

Record = Mapping[str, Any]

_COLLECTION_ALIASES: dict[str, tuple[str, ...]] = {
    "trade_ideas": ("trade_ideas", "tradeIdeas"),
    "proposals": ("proposals",),
    "rating_changes": ("rating_changes", "ratingChanges"),
    "thesis_updates": ("thesis_updates", "thesisUpdates"),
    "projects": ("projects",),
    "assets": ("assets",),
}


@dataclass(frozen=True)
class DecisionSnapshot:
    trade_ideas: tuple[Record, ...] = ()
    proposals: tuple[Record, ...] = ()
    rating_changes: tuple[Record, ...] = ()
    thesis_updates: tuple[Record, ...] = ()
    projects: tuple[Record, ...] = ()
    assets: tuple[Record, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "DecisionSnapshot":
        if not isinstance(payload, Mapping):
            return cls()
        collections: dict[str, tuple[Record, ...]] = {}
        for name, aliases in _COLLECTION_ALIASES.items():
            raw: Any = None
            for alias in aliases:
                if alias in payload:
                    raw = payload[alias]
                    break
            collections[name] = _records(raw)
        return cls(**collections)

    def record_counts(self) -> dict[str, int]:
        return {name: len(getattr(self, name)) for name in _COLLECTION_ALIASES}


def _records(raw: Any) -> tuple[Record, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(r for r in raw if isinstance(r, Mapping))
