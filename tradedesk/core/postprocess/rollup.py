"""Rollup aggregation of repetitive action items.

Responsibilities:
  - Collapse same-title_key action items into one parent once a configured
    count is reached, keeping the source items as children.

Inputs/Outputs:
  - Inputs: scored action items, now, and an ordered list of RollupConfig.
  - Outputs: rollup parents first (config order), then unconsumed items.

Invariants:
  - Parent severity = max child severity.
  - Parent sort_score = max child score + count * bonus.
  - Every consumed candidate appears in exactly one parent and never flat.
  - Configs whose title_key never appears are inert.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from tradedesk.core.decision.config import ScoringWeights
from tradedesk.core.decision.enums import SEVERITY_WEIGHT, Severity, SignalType
from tradedesk.core.decision.models import Chip, Cta, DecisionItem, EntityContext
from tradedesk.core.evaluators.records import parse_timestamp
from .scoring import DEFAULT_WEIGHTS, age_days, sort_key, tier_weight


@dataclass(frozen=True)
class RollupConfig:
    title_key: str
    min_count: int
    make_title: Callable[[int], str]
    make_description: Callable[[Sequence[DecisionItem], datetime], str]
    cta_label: str
    cta_action_key: str
    cta_payload: Optional[Callable[[Sequence[DecisionItem]], Mapping[str, Any]]] = None
    show_breakdown: bool = True


def oldest_age_days(items: Sequence[DecisionItem], now: datetime) -> int:
    oldest = 0
    for item in items:
        if not item.created_at:
            continue
        oldest = max(oldest, age_days(item, now))
    return oldest


def portfolio_breakdown_chips(children: Sequence[DecisionItem]) -> tuple[Chip, ...]:
    counts: dict[str, int] = {}
    for child in children:
        name = child.context.portfolio_name or "Unknown"
        counts[name] = counts.get(name, 0) + 1
    ordered = sorted(counts.items(), key=lambda entry: (-entry[1], entry[0]))
    return tuple(Chip(label=name, value=str(count)) for name, count in ordered)


def default_rollup_configs() -> list[RollupConfig]:
    return [
        RollupConfig(
            title_key=SignalType.PROPOSAL_AWAITING_DECISION.title_key,
            min_count=2,
            make_title=lambda n: f"{n} proposals awaiting decision",
            make_description=lambda children, now: (
                f"Oldest waiting {oldest_age_days(children, now)} days."
            ),
            cta_label="Review all",
            cta_action_key="OPEN_TRADE_QUEUE_FILTERED",
            cta_payload=lambda children: {"filter": "awaiting_decision"},
        ),
        RollupConfig(
            title_key=SignalType.THESIS_STALE.title_key,
            min_count=3,
            make_title=lambda n: f"{n} theses may be stale",
            make_description=lambda children, now: (
                f"Oldest {oldest_age_days(children, now)} days since update."
            ),
            cta_label="Review",
            cta_action_key="OPEN_ASSET_REVIEW_SEQUENCE",
            cta_payload=lambda children: {
                "assetIds": [c.context.asset_id for c in children if c.context.asset_id]
            },
            show_breakdown=False,
        ),
        RollupConfig(
            title_key=SignalType.IDEA_NOT_SIMULATED.title_key,
            min_count=3,
            make_title=lambda n: f"{n} ideas not simulated",
            make_description=lambda children, now: (
                f"Oldest waiting {oldest_age_days(children, now)} days."
            ),
            cta_label="Simulate all",
            cta_action_key="OPEN_TRADE_QUEUE_FILTER",
            cta_payload=lambda children: {"filter": "unsimulated"},
        ),
    ]


def with_min_counts(
    configs: Sequence[RollupConfig], overrides: Mapping[str, int]
) -> list[RollupConfig]:
    return [
        replace(config, min_count=overrides[config.title_key])
        if config.title_key in overrides
        else config
        for config in configs
    ]


def _rollup_id(title_key: str) -> str:
    return "rollup-" + title_key.lower().replace("_", "-")


def _oldest_created_at(children: Sequence[DecisionItem]) -> Optional[str]:
    dated = []
    for child in children:
        ts = parse_timestamp(child.created_at)
        if ts is not None:
            dated.append((ts, child.created_at))
    if not dated:
        return None
    return min(dated)[1]


def build_rollup_item(
    config: RollupConfig,
    candidates: Sequence[DecisionItem],
    now: datetime,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> DecisionItem:
    children = tuple(sorted(candidates, key=lambda item: sort_key(item, weights)))
    lead = children[0]

    max_severity = Severity.GRAY
    for child in children:
        if SEVERITY_WEIGHT[child.severity] > SEVERITY_WEIGHT[max_severity]:
            max_severity = child.severity
    max_score = max(child.sort_score for child in children)
    top_tier = max(children, key=lambda child: tier_weight(child, weights)).decision_tier

    payload = config.cta_payload(children) if config.cta_payload is not None else None
    return DecisionItem(
        id=_rollup_id(config.title_key),
        surface=lead.surface,
        severity=max_severity,
        category=lead.category,
        title_key=config.title_key,
        title=config.make_title(len(children)),
        description=config.make_description(children, now),
        signal_type=lead.signal_type,
        chips=portfolio_breakdown_chips(children) if config.show_breakdown else (),
        context=EntityContext(),
        ctas=(Cta(label=config.cta_label, action_key=config.cta_action_key, payload=payload),),
        dismissible=False,
        decision_tier=top_tier,
        sort_score=max_score + len(children) * weights.rollup_bonus_per_item,
        created_at=_oldest_created_at(children),
        children=children,
    )


def rollup_items(
    items: Sequence[DecisionItem],
    now: datetime,
    configs: Optional[Sequence[RollupConfig]] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[DecisionItem]:
    if configs is None:
        configs = default_rollup_configs()

    result: list[DecisionItem] = []
    consumed: set[int] = set()
    for config in configs:
        candidates = [
            (index, item)
            for index, item in enumerate(items)
            if item.title_key == config.title_key and index not in consumed
        ]
        if len(candidates) < config.min_count or not candidates:
            continue
        consumed.update(index for index, _ in candidates)
        result.append(build_rollup_item(config, [item for _, item in candidates], now, weights))

    for index, item in enumerate(items):
        if index not in consumed:
            result.append(item)
    return result
