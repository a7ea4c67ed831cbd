"""Signal: RATING_NO_FOLLOWUP.

Category:
  - Risk / research integrity.

Contract:
  - Inputs: rating change records and trade ideas.
  - Output: one item per recent rating change lacking a follow-up idea.

Trigger summary:
  - changed_at lies within WINDOW_DAYS of now (not in the future).
  - No trade idea for the same asset was created at or after changed_at.
  - A swing between bullish and bearish ratings is orange, anything else gray.

Edge cases:
  - Changes without asset_id, id, or a parseable changed_at are skipped.
  - Independent of proposal signals on the same asset; neither implies the other.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from tradedesk.core.decision.enums import Severity, SignalType
from tradedesk.core.decision.models import Cta, DecisionItem, EntityContext, make_chips
from .base import build_item
from .records import days_between, ensure_aware, nested_text, text, timestamp
from .snapshot import DecisionSnapshot

WINDOW_DAYS = 14
BULLISH = {"BUY", "STRONG BUY", "OUTPERFORM", "OVERWEIGHT"}
BEARISH = {"SELL", "STRONG SELL", "UNDERPERFORM", "UNDERWEIGHT"}


def _normalize_rating(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return " ".join(value.replace("_", " ").upper().split())


def is_significant_swing(old_value: Optional[str], new_value: Optional[str]) -> bool:
    old = _normalize_rating(old_value)
    new = _normalize_rating(new_value)
    return (old in BULLISH and new in BEARISH) or (old in BEARISH and new in BULLISH)


def _idea_created_by_asset(snapshot: DecisionSnapshot) -> dict[str, list[datetime]]:
    out: dict[str, list[datetime]] = {}
    for record in snapshot.trade_ideas:
        asset_id = text(record, "asset_id")
        created = timestamp(record, "created_at")
        if asset_id is None or created is None:
            continue
        out.setdefault(asset_id, []).append(created)
    return out


def eval_rating_followup(snapshot: DecisionSnapshot, now: datetime) -> list[DecisionItem]:
    now = ensure_aware(now)
    ideas = _idea_created_by_asset(snapshot)
    items: list[DecisionItem] = []
    for record in snapshot.rating_changes:
        change_id = text(record, "id")
        asset_id = text(record, "asset_id")
        changed = timestamp(record, "changed_at")
        if change_id is None or asset_id is None or changed is None:
            continue
        days = days_between(changed, now)
        if days < 0 or days > WINDOW_DAYS:
            continue
        if any(created >= changed for created in ideas.get(asset_id, [])):
            continue

        old_value = text(record, "old_value")
        new_value = text(record, "new_value")
        severity = Severity.ORANGE if is_significant_swing(old_value, new_value) else Severity.GRAY
        ticker = text(record, "asset_symbol") or nested_text(record, "assets", "symbol")
        change_label = None
        if old_value or new_value:
            change_label = f"{old_value or '?'} → {new_value or '?'}"
        items.append(
            build_item(
                SignalType.RATING_NO_FOLLOWUP,
                change_id,
                severity,
                description="Rating changed without a corresponding trade idea.",
                context=EntityContext(asset_id=asset_id, asset_ticker=ticker),
                chips=make_chips(
                    ("Ticker", ticker),
                    ("Change", change_label),
                    ("Changed", f"{days}d ago"),
                ),
                ctas=[
                    Cta(
                        label="Create Idea",
                        action_key="OPEN_ASSET_CREATE_IDEA",
                        payload={"assetId": asset_id},
                    )
                ],
                created_at=text(record, "changed_at"),
            )
        )
    return items
