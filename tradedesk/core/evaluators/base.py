from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Optional

from tradedesk.core.decision.enums import (
    Severity,
    SignalType,
    signal_category,
    signal_surface,
    signal_tier,
    signal_title,
)
from tradedesk.core.decision.models import Chip, Cta, DecisionItem, EntityContext

from .snapshot import DecisionSnapshot

Evaluator = Callable[[DecisionSnapshot, datetime], list[DecisionItem]]


def item_id(signal_type: SignalType, entity_id: str, subkey: Optional[str] = None) -> str:
    parts = [signal_type.value, entity_id]
    if subkey:
        parts.append(subkey)
    return "-".join(parts)


def build_item(
    signal_type: SignalType,
    entity_id: str,
    severity: Severity,
    description: str,
    context: EntityContext,
    chips: Iterable[Chip] = (),
    ctas: Iterable[Cta] = (),
    created_at: Optional[str] = None,
    dismissible: bool = False,
    subkey: Optional[str] = None,
    title: Optional[str] = None,
) -> DecisionItem:
    return DecisionItem(
        id=item_id(signal_type, entity_id, subkey),
        surface=signal_surface(signal_type),
        severity=severity,
        category=signal_category(signal_type),
        title_key=signal_type.title_key,
        title=title or signal_title(signal_type),
        description=description,
        signal_type=signal_type,
        chips=tuple(chips),
        context=context,
        ctas=tuple(ctas),
        dismissible=dismissible,
        decision_tier=signal_tier(signal_type),
        created_at=created_at,
    )


def age_chip(days: Optional[int]) -> Optional[str]:
    if days is None:
        return None
    return f"{days}d"


def ramp_severity(days: int, orange_days: int, red_days: int) -> Optional[Severity]:
    if days >= red_days:
        return Severity.RED
    if days >= orange_days:
        return Severity.ORANGE
    return None
