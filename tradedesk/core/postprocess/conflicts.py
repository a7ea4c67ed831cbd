"""Conflict suppression between items about the same asset.

Responsibilities:
  - Drop items whose meaning is superseded by another item on the same asset.

Rules:
  - Any open idea signal (proposal awaiting, execution pending, idea not
    simulated) suppresses HIGH_EV_NO_IDEA on that asset.
  - EXECUTION_NOT_CONFIRMED for trade idea T suppresses
    PROPOSAL_AWAITING_DECISION for T only, never other ideas on the asset.

Invariants:
  - Items without an asset id are never suppressed.
  - RATING_NO_FOLLOWUP and PROPOSAL_AWAITING_DECISION are independent:
    no rule may suppress one because of the other.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence

from tradedesk.core.decision.enums import SignalType
from tradedesk.core.decision.models import DecisionItem, resolve_signal_type

SuppressionRule = Callable[[DecisionItem, Sequence[DecisionItem]], bool]

IDEA_SIGNALS = {
    SignalType.PROPOSAL_AWAITING_DECISION,
    SignalType.EXECUTION_NOT_CONFIRMED,
    SignalType.IDEA_NOT_SIMULATED,
}


def rule_idea_supersedes_no_idea(item: DecisionItem, asset_items: Sequence[DecisionItem]) -> bool:
    if resolve_signal_type(item) is not SignalType.HIGH_EV_NO_IDEA:
        return False
    return any(resolve_signal_type(other) in IDEA_SIGNALS for other in asset_items)


def rule_execution_supersedes_proposal(
    item: DecisionItem, asset_items: Sequence[DecisionItem]
) -> bool:
    if resolve_signal_type(item) is not SignalType.PROPOSAL_AWAITING_DECISION:
        return False
    trade_idea_id = item.context.trade_idea_id
    if not trade_idea_id:
        return False
    return any(
        resolve_signal_type(other) is SignalType.EXECUTION_NOT_CONFIRMED
        and other.context.trade_idea_id == trade_idea_id
        for other in asset_items
    )


DEFAULT_SUPPRESSION_RULES: tuple[SuppressionRule, ...] = (
    rule_idea_supersedes_no_idea,
    rule_execution_supersedes_proposal,
)


def suppress_conflicts(
    items: Sequence[DecisionItem],
    now: Optional[datetime] = None,
    rules: Sequence[SuppressionRule] = DEFAULT_SUPPRESSION_RULES,
) -> list[DecisionItem]:
    _ = now
    by_asset: dict[str, list[DecisionItem]] = {}
    for item in items:
        asset_id = item.context.asset_id
        if not asset_id:
            continue
        by_asset.setdefault(asset_id, []).append(item)

    suppressed: set[str] = set()
    for asset_items in by_asset.values():
        for item in asset_items:
            if any(rule(item, asset_items) for rule in rules):
                suppressed.add(item.id)

    return [item for item in items if item.id not in suppressed]
