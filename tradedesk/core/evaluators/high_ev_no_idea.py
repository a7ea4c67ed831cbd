"""Signal: HIGH_EV_NO_IDEA.

Category:
  - Alpha / informational.

Contract:
  - Inputs: asset records with expected_return, and trade ideas.
  - Output: gray, dismissible intel items.

Trigger summary:
  - |expected_return| >= EV_THRESHOLD.
  - No open trade idea (no outcome, no decision outcome) exists for the asset.
    Every pair-trade leg counts for its own asset.

Edge cases:
  - Assets without id or a numeric expected_return are skipped.
"""

from __future__ import annotations

from datetime import datetime

from tradedesk.core.decision.enums import Severity, SignalType
from tradedesk.core.decision.models import Cta, DecisionItem, EntityContext, make_chips
from .base import build_item
from .records import number, text
from .snapshot import DecisionSnapshot

EV_THRESHOLD = 0.15


def _open_idea_assets(snapshot: DecisionSnapshot) -> set[str]:
    assets: set[str] = set()
    for record in snapshot.trade_ideas:
        asset_id = text(record, "asset_id")
        if asset_id is None:
            continue
        if text(record, "outcome") is not None or text(record, "decision_outcome") is not None:
            continue
        assets.add(asset_id)
    return assets


def eval_high_ev_no_idea(snapshot: DecisionSnapshot, now: datetime) -> list[DecisionItem]:
    _ = now
    active_assets = _open_idea_assets(snapshot)
    items: list[DecisionItem] = []
    for record in snapshot.assets:
        asset_id = text(record, "id")
        expected = number(record, "expected_return")
        if expected is None:
            expected = number(record, "expectedReturn")
        if asset_id is None or expected is None:
            continue
        if abs(expected) < EV_THRESHOLD or asset_id in active_assets:
            continue
        ticker = text(record, "symbol")
        direction = "upside" if expected > 0 else "downside"
        ev_pct = f"{expected * 100:+.0f}%"
        items.append(
            build_item(
                SignalType.HIGH_EV_NO_IDEA,
                asset_id,
                Severity.GRAY,
                description=f"Expected value shows {ev_pct} {direction} with no active idea.",
                context=EntityContext(asset_id=asset_id, asset_ticker=ticker),
                chips=make_chips(("Ticker", ticker), ("EV", ev_pct)),
                ctas=[
                    Cta(
                        label="Create Idea",
                        action_key="OPEN_ASSET_CREATE_IDEA",
                        payload={"assetId": asset_id},
                    )
                ],
                dismissible=True,
            )
        )
    return items
