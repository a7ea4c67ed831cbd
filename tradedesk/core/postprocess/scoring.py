"""Deterministic priority scoring and ordering.

Responsibilities:
  - Compute sort_score from tier, severity, category, and age.
  - Define the total order used by the final sort.

Invariants:
  - Pure: depends only on the item, now, and the weights.
  - Order: tier desc, severity desc, sort_score desc, id asc.
  - Within one tier and severity, sort_score differs only by the residual:
    the action-only category weight plus the capped age bonus. A higher
    category can outrank an older item of a lower category.
  - Weights are validated so sort_score never contradicts tier/severity order.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from tradedesk.core.decision.config import ScoringWeights
from tradedesk.core.decision.enums import SEVERITY_WEIGHT, Surface
from tradedesk.core.decision.models import DecisionItem
from tradedesk.core.evaluators.records import days_since

DEFAULT_WEIGHTS = ScoringWeights()


def age_days(item: DecisionItem, now: datetime) -> int:
    days = days_since(item.created_at, now)
    if days is None or days < 0:
        return 0
    return days


def tier_weight(item: DecisionItem, weights: ScoringWeights = DEFAULT_WEIGHTS) -> int:
    if item.decision_tier is None:
        return weights.untiered_weight
    return weights.tier_weights.get(item.decision_tier, weights.untiered_weight)


def compute_sort_score(
    item: DecisionItem, now: datetime, weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    score = tier_weight(item, weights)
    score += weights.severity_weights[item.severity]
    if item.surface is Surface.ACTION:
        score += weights.category_weights.get(item.category, 0)
    score += min(age_days(item, now), weights.age_cap_days) * weights.age_weight_per_day
    return score


def score_items(
    items: Sequence[DecisionItem],
    now: datetime,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[DecisionItem]:
    return [item.with_sort_score(compute_sort_score(item, now, weights)) for item in items]


def sort_key(item: DecisionItem, weights: ScoringWeights = DEFAULT_WEIGHTS) -> tuple:
    return (
        -tier_weight(item, weights),
        -SEVERITY_WEIGHT[item.severity],
        -item.sort_score,
        item.id,
        item.created_at or "",
        item.title_key,
    )


def compare_items(
    a: DecisionItem, b: DecisionItem, weights: ScoringWeights = DEFAULT_WEIGHTS
) -> int:
    key_a = sort_key(a, weights)
    key_b = sort_key(b, weights)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def sort_items(
    items: Sequence[DecisionItem],
    now: Optional[datetime] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[DecisionItem]:
    _ = now
    return sorted(items, key=lambda item: sort_key(item, weights))
