"""Signal: EXECUTION_NOT_CONFIRMED.

Category:
  - Process / capital allocation.

Contract:
  - Inputs: trade ideas (pair legs grouped).
  - Output: one red item per accepted idea whose execution was never logged.

Trigger summary:
  - decision_outcome is accepted (or approved) and outcome is unset.
  - At least MIN_DAYS whole days have passed since decided_at.

Edge cases:
  - Missing or unparseable decided_at skips the idea.
"""

from __future__ import annotations

from datetime import datetime

from tradedesk.core.decision.enums import Severity, SignalType
from tradedesk.core.decision.models import Cta, DecisionItem, EntityContext, make_chips
from .base import age_chip, build_item
from .pair_trades import group_trade_ideas
from .records import days_since
from .snapshot import DecisionSnapshot

MIN_DAYS = 2
ACCEPTED_OUTCOMES = {"accepted", "approved"}


def eval_execution_pending(snapshot: DecisionSnapshot, now: datetime) -> list[DecisionItem]:
    items: list[DecisionItem] = []
    for idea in group_trade_ideas(snapshot.trade_ideas):
        if (idea.decision_outcome or "").lower() not in ACCEPTED_OUTCOMES:
            continue
        if idea.outcome is not None:
            continue
        days = days_since(idea.decided_at, now)
        if days is None or days < MIN_DAYS:
            continue
        action = idea.action.capitalize() if idea.action else None
        items.append(
            build_item(
                SignalType.EXECUTION_NOT_CONFIRMED,
                idea.id,
                Severity.RED,
                description=f"Approved {days} days ago; execution has not been logged.",
                context=EntityContext(
                    asset_id=idea.asset_id,
                    asset_ticker=idea.ticker,
                    portfolio_id=idea.portfolio_id,
                    portfolio_name=idea.portfolio_name,
                    trade_idea_id=idea.id,
                ),
                chips=make_chips(
                    ("Portfolio", idea.portfolio_name),
                    ("Ticker", idea.ticker),
                    ("Action", action),
                    ("Since decision", age_chip(days)),
                ),
                ctas=[
                    Cta(
                        label="Confirm execution",
                        action_key="OPEN_TRADE_QUEUE_EXECUTION",
                        payload={"tradeIdeaId": idea.id},
                    )
                ],
                created_at=idea.decided_at,
            )
        )
    return items
