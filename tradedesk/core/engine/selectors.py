"""Read-side selectors over an engine result.

Responsibilities:
  - Scope a result to the dashboard, one asset, or one portfolio.
  - Curate a short dashboard list that keeps category diversity.

Invariants:
  - Asset/portfolio views unwrap rollups and show matching children only.
  - Selectors never reorder the engine's output except where documented.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from tradedesk.core.decision.enums import Category
from tradedesk.core.decision.models import DecisionItem
from .result import EngineResult

DASHBOARD_LIMIT = 8
REQUIRED_DASHBOARD_CATEGORIES = (Category.PROCESS, Category.RISK)


@dataclass(frozen=True)
class DecisionSlice:
    action: list[DecisionItem]
    intel: list[DecisionItem]


def flatten_for_filter(
    items: Sequence[DecisionItem], predicate: Callable[[DecisionItem], bool]
) -> list[DecisionItem]:
    out: list[DecisionItem] = []
    for item in items:
        if item.children:
            out.extend(child for child in item.children if predicate(child))
        elif predicate(item):
            out.append(item)
    return out


def select_for_dashboard(result: EngineResult) -> DecisionSlice:
    return DecisionSlice(action=list(result.action_items), intel=list(result.intel_items))


def select_for_asset(result: EngineResult, asset_id: str) -> DecisionSlice:
    def matches(item: DecisionItem) -> bool:
        return item.context.asset_id == asset_id

    return DecisionSlice(
        action=flatten_for_filter(result.action_items, matches),
        intel=[item for item in result.intel_items if matches(item)],
    )


def select_for_portfolio(result: EngineResult, portfolio_id: str) -> DecisionSlice:
    def matches(item: DecisionItem) -> bool:
        return item.context.portfolio_id == portfolio_id

    return DecisionSlice(
        action=flatten_for_filter(result.action_items, matches),
        intel=[item for item in result.intel_items if matches(item)],
    )


def select_top_for_dashboard(
    items: Sequence[DecisionItem], limit: int = DASHBOARD_LIMIT
) -> list[DecisionItem]:
    if len(items) <= limit:
        return list(items)

    ranked = sorted(items, key=lambda item: (-item.sort_score, item.id))
    picked = ranked[:limit]
    rest = ranked[limit:]

    for category in REQUIRED_DASHBOARD_CATEGORIES:
        if any(item.category is category for item in picked):
            continue
        candidate = next((item for item in rest if item.category is category), None)
        if candidate is None:
            continue
        # Evict the lowest-scored pick unless it is the last of a required category.
        for index in range(len(picked) - 1, -1, -1):
            victim = picked[index]
            same_category = sum(1 for item in picked if item.category is victim.category)
            if victim.category in REQUIRED_DASHBOARD_CATEGORIES and same_category == 1:
                continue
            picked[index] = candidate
            rest.remove(candidate)
            break

    return sorted(picked, key=lambda item: (-item.sort_score, item.id))
