"""Signal: IDEA_NOT_SIMULATED.

Category:
  - Process / capital allocation.

Contract:
  - Inputs: trade ideas (pair legs grouped) and proposal records.
  - Output: one orange item per early-stage idea without a simulation.

Trigger summary:
  - Stage is "idea" or "simulating".
  - No outcome and no decision outcome.
  - No proposal record references the idea (or any of its pair legs).
  - No age gate: brand new ideas fire too.

Edge cases:
  - Missing created_at keeps the item but drops the Age chip.
"""

from __future__ import annotations

from datetime import datetime

from tradedesk.core.decision.enums import Severity, SignalType
from tradedesk.core.decision.models import Cta, DecisionItem, EntityContext, make_chips
from .base import age_chip, build_item
from .pair_trades import group_trade_ideas
from .proposal_awaiting import proposals_by_idea
from .records import days_since
from .snapshot import DecisionSnapshot

EARLY_STAGES = {"idea", "simulating"}


def eval_idea_not_simulated(snapshot: DecisionSnapshot, now: datetime) -> list[DecisionItem]:
    simulated = proposals_by_idea(snapshot)
    items: list[DecisionItem] = []
    for idea in group_trade_ideas(snapshot.trade_ideas):
        if idea.stage not in EARLY_STAGES or not idea.is_open:
            continue
        if any(leg_id in simulated for leg_id in idea.leg_ids):
            continue
        days = days_since(idea.created_at, now)
        if days is not None:
            days = max(days, 0)
        items.append(
            build_item(
                SignalType.IDEA_NOT_SIMULATED,
                idea.id,
                Severity.ORANGE,
                description="Trade idea created without a portfolio impact test.",
                context=EntityContext(
                    asset_id=idea.asset_id,
                    asset_ticker=idea.ticker,
                    portfolio_id=idea.portfolio_id,
                    portfolio_name=idea.portfolio_name,
                    trade_idea_id=idea.id,
                    stage=idea.stage,
                ),
                chips=make_chips(
                    ("Ticker", idea.ticker),
                    ("Age", age_chip(days)),
                    ("Portfolio", idea.portfolio_name),
                ),
                ctas=[
                    Cta(
                        label="Simulate",
                        action_key="OPEN_TRADE_LAB_SIMULATION",
                        payload={"assetId": idea.asset_id, "tradeIdeaId": idea.id},
                    )
                ],
                created_at=idea.created_at,
            )
        )
    return items
