from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Optional

from tradedesk.core.decision.models import DecisionItem
from .base import Evaluator
from .deliverable_overdue import eval_deliverable_overdue
from .execution_pending import eval_execution_pending
from .high_ev_no_idea import eval_high_ev_no_idea
from .idea_not_simulated import eval_idea_not_simulated
from .proposal_awaiting import eval_proposal_awaiting
from .rating_followup import eval_rating_followup
from .snapshot import DecisionSnapshot
from .thesis_stale import eval_thesis_stale


class EvaluatorRegistry:
    def __init__(self) -> None:
        self._registry: Dict[str, Evaluator] = {}

    def register(self, name: str, evaluator: Evaluator) -> None:
        if name in self._registry:
            raise ValueError(f"Evaluator already registered: {name}")
        self._registry[name] = evaluator

    def get(self, name: str) -> Evaluator:
        if name not in self._registry:
            raise ValueError(f"Unknown evaluator: {name}")
        return self._registry[name]

    def names(self) -> list[str]:
        return list(self._registry)

    def evaluate_all(
        self,
        snapshot: DecisionSnapshot,
        now: datetime,
        debug_fn: Optional[Callable[[str], None]] = None,
    ) -> list[DecisionItem]:
        candidates: list[DecisionItem] = []
        for name, evaluator in self._registry.items():
            produced = evaluator(snapshot, now)
            if debug_fn is not None:
                debug_fn(f"EVALUATOR={name} items={len(produced)}")
            candidates.extend(produced)
        return candidates


def build_default_registry() -> EvaluatorRegistry:
    registry = EvaluatorRegistry()
    registry.register("proposal_awaiting", eval_proposal_awaiting)
    registry.register("execution_pending", eval_execution_pending)
    registry.register("idea_not_simulated", eval_idea_not_simulated)
    registry.register("deliverable_overdue", eval_deliverable_overdue)
    registry.register("rating_followup", eval_rating_followup)
    registry.register("thesis_stale", eval_thesis_stale)
    registry.register("high_ev_no_idea", eval_high_ev_no_idea)
    return registry


__all__ = ["EvaluatorRegistry", "build_default_registry"]
