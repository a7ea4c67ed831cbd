"""Signal: THESIS_STALE.

Category:
  - Risk / research coverage.

Contract:
  - Inputs: thesis update records (asset_id, updated_at, created_by, asset_symbol).
  - Output: at most one item per asset.
  - Determinism: depends only on the records and now.

Trigger summary:
  - Uses the most recent thesis update per asset.
  - daysSince < ORANGE_DAYS emits nothing.
  - ORANGE_DAYS <= daysSince < RED_DAYS emits orange.
  - daysSince >= RED_DAYS emits red.

Edge cases:
  - Records without asset_id or a parseable updated_at are skipped.
  - Missing ticker drops the Ticker chip.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from tradedesk.core.decision.enums import SignalType
from tradedesk.core.decision.models import Cta, DecisionItem, EntityContext, make_chips
from .base import age_chip, build_item, ramp_severity
from .records import days_between, ensure_aware, iso, nested_text, text, timestamp
from .snapshot import DecisionSnapshot, Record

ORANGE_DAYS = 90
RED_DAYS = 180


def _latest_by_asset(records: tuple[Record, ...]) -> dict[str, tuple[datetime, Record]]:
    latest: dict[str, tuple[datetime, Record]] = {}
    for record in records:
        asset_id = text(record, "asset_id")
        updated = timestamp(record, "updated_at")
        if asset_id is None or updated is None:
            continue
        current = latest.get(asset_id)
        if current is None or updated > current[0]:
            latest[asset_id] = (updated, record)
    return latest


def eval_thesis_stale(
    snapshot: DecisionSnapshot,
    now: datetime,
    orange_days: int = ORANGE_DAYS,
    red_days: int = RED_DAYS,
) -> list[DecisionItem]:
    now = ensure_aware(now)
    items: list[DecisionItem] = []
    for asset_id, (updated, record) in _latest_by_asset(snapshot.thesis_updates).items():
        days = days_between(updated, now)
        severity = ramp_severity(days, orange_days, red_days)
        if severity is None:
            continue
        ticker: Optional[str] = text(record, "asset_symbol") or nested_text(record, "assets", "symbol")
        items.append(
            build_item(
                SignalType.THESIS_STALE,
                asset_id,
                severity,
                description=f"Research thesis has not been updated in {days} days.",
                context=EntityContext(asset_id=asset_id, asset_ticker=ticker),
                chips=make_chips(("Ticker", ticker), ("Age", age_chip(days))),
                ctas=[
                    Cta(
                        label="Update Thesis",
                        action_key="OPEN_ASSET_UPDATE_THESIS",
                        payload={"assetId": asset_id},
                    )
                ],
                created_at=iso(updated),
            )
        )
    return items
