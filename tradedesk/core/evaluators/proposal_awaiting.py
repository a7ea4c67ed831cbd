"""Signal: PROPOSAL_AWAITING_DECISION.

Category:
  - Process / capital allocation.

Contract:
  - Inputs: trade ideas (pair legs grouped) and proposal records.
  - Output: one item per idea sitting in the deciding stage.
  - Determinism: depends only on the records and now.

Trigger summary:
  - Stage must be "deciding" with no decision outcome and no outcome.
  - Age counts from updated_at, falling back to created_at.
  - Fires at any age: gray below ORANGE_DAYS, orange from ORANGE_DAYS,
    red from RED_DAYS.

Edge cases:
  - Ideas without any parseable timestamp are skipped.
  - proposal_id is attached when a proposal references the idea or a leg.
"""

from __future__ import annotations

from datetime import datetime

from tradedesk.core.decision.enums import Severity, SignalType
from tradedesk.core.decision.models import Cta, DecisionItem, EntityContext, make_chips
from .base import age_chip, build_item, ramp_severity
from .pair_trades import TradeIdeaView, group_trade_ideas
from .records import days_since, text
from .snapshot import DecisionSnapshot

ORANGE_DAYS = 5
RED_DAYS = 10
DECIDING_STAGES = {"deciding"}


def proposals_by_idea(snapshot: DecisionSnapshot) -> dict[str, str]:
    out: dict[str, str] = {}
    for record in snapshot.proposals:
        idea_id = text(record, "trade_queue_item_id")
        if idea_id is None:
            continue
        out.setdefault(idea_id, text(record, "id") or "")
    return out


def _proposal_for(idea: TradeIdeaView, proposals: dict[str, str]) -> str | None:
    for leg_id in idea.leg_ids:
        proposal_id = proposals.get(leg_id)
        if proposal_id:
            return proposal_id
    return None


def eval_proposal_awaiting(snapshot: DecisionSnapshot, now: datetime) -> list[DecisionItem]:
    proposals = proposals_by_idea(snapshot)
    items: list[DecisionItem] = []
    for idea in group_trade_ideas(snapshot.trade_ideas):
        if idea.stage not in DECIDING_STAGES or not idea.is_open:
            continue
        origin = idea.updated_at or idea.created_at
        days = days_since(origin, now)
        if days is None:
            continue
        days = max(days, 0)
        severity = ramp_severity(days, ORANGE_DAYS, RED_DAYS) or Severity.GRAY
        items.append(
            build_item(
                SignalType.PROPOSAL_AWAITING_DECISION,
                idea.id,
                severity,
                description=f"Proposal has been waiting {days} days for a decision.",
                context=EntityContext(
                    asset_id=idea.asset_id,
                    asset_ticker=idea.ticker,
                    portfolio_id=idea.portfolio_id,
                    portfolio_name=idea.portfolio_name,
                    trade_idea_id=idea.id,
                    proposal_id=_proposal_for(idea, proposals),
                    stage=idea.stage,
                ),
                chips=make_chips(
                    ("Portfolio", idea.portfolio_name),
                    ("Ticker", idea.ticker),
                    ("Age", age_chip(days)),
                ),
                ctas=[
                    Cta(
                        label="Review",
                        action_key="OPEN_TRADE_QUEUE_PROPOSAL",
                        payload={"tradeIdeaId": idea.id},
                    )
                ],
                created_at=origin,
            )
        )
    return items
