"""Trade idea views with pair-trade grouping.

Responsibilities:
  - Turn raw trade idea records into TradeIdeaView rows.
  - Collapse legs sharing a pair key into one combined view.

Trigger summary:
  - Pair key is pair_id, falling back to the legacy pair_trade_id.
  - Groups with 2+ legs become one view with id "pair-<key>".
  - Buy/add legs form the long side, sell/trim legs the short side;
    the label reads "Buy A, B / Sell C".
  - The earliest leg created_at is the group's created_at.

Edge cases:
  - A single leg without a partner is treated as a normal idea.
  - Records without an id are skipped.
  - Missing tickers drop out of the combined label.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from .records import nested_text, parse_timestamp, text
from .snapshot import Record

LONG_ACTIONS = {"buy", "add"}
SHORT_ACTIONS = {"sell", "trim"}


@dataclass(frozen=True)
class TradeIdeaView:
    id: str
    asset_id: Optional[str]
    ticker: Optional[str]
    portfolio_id: Optional[str]
    portfolio_name: Optional[str]
    action: Optional[str]
    stage: Optional[str]
    decision_outcome: Optional[str]
    outcome: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
    decided_at: Optional[str]
    leg_ids: tuple[str, ...]
    is_pair: bool = False

    @property
    def is_open(self) -> bool:
        return self.outcome is None and self.decision_outcome is None


def _view_from_record(record: Record) -> Optional[TradeIdeaView]:
    idea_id = text(record, "id")
    if idea_id is None:
        return None
    action = text(record, "action")
    return TradeIdeaView(
        id=idea_id,
        asset_id=text(record, "asset_id"),
        ticker=text(record, "asset_symbol") or nested_text(record, "assets", "symbol"),
        portfolio_id=text(record, "portfolio_id"),
        portfolio_name=text(record, "portfolio_name") or nested_text(record, "portfolios", "name"),
        action=action.lower() if action else None,
        stage=(text(record, "stage") or "").lower() or None,
        decision_outcome=text(record, "decision_outcome"),
        outcome=text(record, "outcome"),
        created_at=text(record, "created_at"),
        updated_at=text(record, "updated_at"),
        decided_at=text(record, "decided_at"),
        leg_ids=(idea_id,),
    )


def _pair_key(record: Record) -> Optional[str]:
    return text(record, "pair_id") or text(record, "pair_trade_id")


def _combine_legs(pair_key: str, legs: list[TradeIdeaView]) -> TradeIdeaView:
    long_legs = [leg for leg in legs if leg.action in LONG_ACTIONS]
    short_legs = [leg for leg in legs if leg.action in SHORT_ACTIONS]
    long_tickers = [leg.ticker for leg in long_legs if leg.ticker]
    short_tickers = [leg.ticker for leg in short_legs if leg.ticker]

    sides: list[str] = []
    if long_tickers:
        sides.append("Buy " + ", ".join(long_tickers))
    if short_tickers:
        sides.append("Sell " + ", ".join(short_tickers))
    label = " / ".join(sides) or None

    created = []
    for leg in legs:
        ts = parse_timestamp(leg.created_at)
        if ts is not None:
            created.append((ts, leg.created_at))
    base = long_legs[0] if long_legs else legs[0]
    return replace(
        base,
        id=f"pair-{pair_key}",
        ticker=label,
        created_at=min(created)[1] if created else None,
        leg_ids=tuple(leg.id for leg in legs),
        is_pair=True,
    )


def group_trade_ideas(records: Iterable[Record]) -> list[TradeIdeaView]:
    singles: list[TradeIdeaView] = []
    pair_groups: dict[str, list[TradeIdeaView]] = {}
    for record in records:
        view = _view_from_record(record)
        if view is None:
            continue
        key = _pair_key(record)
        if key is None:
            singles.append(view)
            continue
        pair_groups.setdefault(key, []).append(view)

    for key, legs in pair_groups.items():
        if len(legs) < 2:
            singles.extend(legs)
            continue
        singles.append(_combine_legs(key, legs))
    return singles
