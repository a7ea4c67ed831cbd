"""Result payload for one decision engine run.

Responsibilities:
  - Carry ordered action/intel items plus run metadata for presentation.

Inputs/Outputs:
  - Inputs: produced by engine.evaluator.evaluate_and_postprocess.
  - Outputs: immutable dataclasses consumed by app/cli layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tradedesk.core.decision.models import DecisionItem, item_to_dict


@dataclass(frozen=True)
class EngineMeta:
    generated_at: str
    candidate_count: int
    action_count: int
    intel_count: int


@dataclass(frozen=True)
class EngineResult:
    action_items: list[DecisionItem]
    intel_items: list[DecisionItem]
    meta: EngineMeta

    def to_dict(self) -> dict[str, Any]:
        return {
            "actionItems": [item_to_dict(item) for item in self.action_items],
            "intelItems": [item_to_dict(item) for item in self.intel_items],
            "meta": {
                "generatedAt": self.meta.generated_at,
                "candidates": self.meta.candidate_count,
                "counts": {
                    "action": self.meta.action_count,
                    "intel": self.meta.intel_count,
                },
            },
        }
