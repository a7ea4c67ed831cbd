"""Deduplication of candidate items.

Responsibilities:
  - Collapse items describing the same signal about the same entity.

Invariants:
  - Key = signal type, category, asset/proposal/trade idea/project ids.
  - On collision the higher severity wins; ties keep the stored item.
  - Idempotent: dedup(dedup(x)) == dedup(x).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from tradedesk.core.decision.enums import SEVERITY_WEIGHT
from tradedesk.core.decision.models import DecisionItem, resolve_signal_type


def signal_token(item: DecisionItem) -> str:
    signal_type = resolve_signal_type(item)
    if signal_type is not None:
        return signal_type.value
    # Unknown producers: first two hyphen-delimited id tokens.
    return "-".join(item.id.split("-")[:2])


def dedup_key(item: DecisionItem) -> str:
    return ":".join((signal_token(item), item.category.value) + item.context.entity_refs())


def dedup(items: Sequence[DecisionItem], now: Optional[datetime] = None) -> list[DecisionItem]:
    _ = now
    seen: dict[str, DecisionItem] = {}
    for item in items:
        key = dedup_key(item)
        existing = seen.get(key)
        if existing is None or SEVERITY_WEIGHT[item.severity] > SEVERITY_WEIGHT[existing.severity]:
            seen[key] = item
    return list(seen.values())
