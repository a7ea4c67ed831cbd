"""Domain models for decision items.

Responsibilities:
  - Define immutable carriers for chips, CTAs, entity references, and items.
  - Serialize items to plain dicts for presentation collaborators.

Invariants:
  - Items are frozen; later stages derive new items via dataclasses.replace.
  - Only sort_score and children are ever derived after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .enums import Category, DecisionTier, Severity, SignalType, Surface


@dataclass(frozen=True)
class Chip:
    label: str
    value: str


@dataclass(frozen=True)
class Cta:
    label: str
    action_key: str
    kind: str = "primary"
    payload: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class EntityContext:
    """Typed references to the entities an item is about.

    asset/proposal/trade idea/project ids correlate items for dedup and
    suppression; the remaining fields are display and filter hints.
    """

    asset_id: Optional[str] = None
    asset_ticker: Optional[str] = None
    portfolio_id: Optional[str] = None
    portfolio_name: Optional[str] = None
    trade_idea_id: Optional[str] = None
    proposal_id: Optional[str] = None
    project_id: Optional[str] = None
    stage: Optional[str] = None

    def entity_refs(self) -> tuple[str, str, str, str]:
        return (
            self.asset_id or "",
            self.proposal_id or "",
            self.trade_idea_id or "",
            self.project_id or "",
        )


@dataclass(frozen=True)
class DecisionItem:
    id: str
    surface: Surface
    severity: Severity
    category: Category
    title_key: str
    title: str
    description: str
    signal_type: Optional[SignalType] = None
    chips: tuple[Chip, ...] = ()
    context: EntityContext = field(default_factory=EntityContext)
    ctas: tuple[Cta, ...] = ()
    dismissible: bool = False
    decision_tier: Optional[DecisionTier] = None
    sort_score: float = 0
    created_at: Optional[str] = None
    children: tuple["DecisionItem", ...] = ()

    @property
    def is_rollup(self) -> bool:
        return len(self.children) > 0

    def with_sort_score(self, sort_score: float) -> "DecisionItem":
        return replace(self, sort_score=sort_score)


def make_chips(*pairs: tuple[str, object]) -> tuple[Chip, ...]:
    chips: list[Chip] = []
    for label, value in pairs:
        if value is None:
            continue
        text = str(value).strip()
        if not text:
            continue
        chips.append(Chip(label=label, value=text))
    return tuple(chips)


def resolve_signal_type(item: DecisionItem) -> Optional[SignalType]:
    if item.signal_type is not None:
        return item.signal_type
    return SignalType.from_item_id(item.id)


def item_to_dict(item: DecisionItem) -> dict[str, Any]:
    ctx = item.context
    context = {
        "assetId": ctx.asset_id,
        "assetTicker": ctx.asset_ticker,
        "portfolioId": ctx.portfolio_id,
        "portfolioName": ctx.portfolio_name,
        "tradeIdeaId": ctx.trade_idea_id,
        "proposalId": ctx.proposal_id,
        "projectId": ctx.project_id,
        "stage": ctx.stage,
    }
    payload: dict[str, Any] = {
        "id": item.id,
        "surface": item.surface.value,
        "severity": item.severity.value,
        "category": item.category.value,
        "titleKey": item.title_key,
        "title": item.title,
        "description": item.description,
        "chips": [{"label": c.label, "value": c.value} for c in item.chips],
        "context": {k: v for k, v in context.items() if v is not None},
        "ctas": [
            {
                "label": cta.label,
                "actionKey": cta.action_key,
                "kind": cta.kind,
                "payload": dict(cta.payload) if cta.payload is not None else None,
            }
            for cta in item.ctas
        ],
        "dismissible": item.dismissible,
        "decisionTier": item.decision_tier.value if item.decision_tier else None,
        "sortScore": item.sort_score,
        "createdAt": item.created_at,
    }
    if item.children:
        payload["children"] = [item_to_dict(child) for child in item.children]
    return payload
