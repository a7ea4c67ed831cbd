from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .enums import Category, DecisionTier, Severity

DEFAULT_TIER_WEIGHTS: dict[DecisionTier, int] = {
    DecisionTier.CAPITAL: 30000,
    DecisionTier.INTEGRITY: 20000,
    DecisionTier.COVERAGE: 10000,
}
DEFAULT_SEVERITY_WEIGHTS: dict[Severity, int] = {
    Severity.RED: 3000,
    Severity.ORANGE: 2000,
    Severity.GRAY: 1000,
}
DEFAULT_CATEGORY_WEIGHTS: dict[Category, int] = {
    Category.PROCESS: 400,
    Category.RISK: 300,
    Category.PROJECT: 200,
    Category.ALPHA: 100,
    Category.CATALYST: 100,
}
AGE_WEIGHT_PER_DAY = 5
AGE_CAP_DAYS = 100
ROLLUP_BONUS_PER_ITEM = 10


@dataclass(frozen=True)
class ScoringWeights:
    tier_weights: dict[DecisionTier, int] = field(default_factory=lambda: dict(DEFAULT_TIER_WEIGHTS))
    severity_weights: dict[Severity, int] = field(
        default_factory=lambda: dict(DEFAULT_SEVERITY_WEIGHTS)
    )
    category_weights: dict[Category, int] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS)
    )
    age_weight_per_day: int = AGE_WEIGHT_PER_DAY
    age_cap_days: int = AGE_CAP_DAYS
    rollup_bonus_per_item: int = ROLLUP_BONUS_PER_ITEM
    untiered_weight: int = 0

    def validate(self) -> None:
        if self.age_weight_per_day < 0 or self.age_cap_days < 0:
            raise ValueError("age weights must be >= 0")
        if self.rollup_bonus_per_item < 0:
            raise ValueError("rollup_bonus_per_item must be >= 0")
        for severity in Severity:
            if severity not in self.severity_weights:
                raise ValueError(f"severity_weights missing '{severity.value}'")
        for tier in DecisionTier:
            if tier not in self.tier_weights:
                raise ValueError(f"tier_weights missing '{tier.value}'")

        # Residual (category + age) must never reorder severities, and
        # severity + residual must never reorder tiers.
        residual = max(self.category_weights.values(), default=0)
        residual += self.age_weight_per_day * self.age_cap_days
        sev_sorted = sorted(self.severity_weights.values())
        sev_gaps = [b - a for a, b in zip(sev_sorted, sev_sorted[1:])]
        if sev_gaps and residual >= min(sev_gaps):
            raise ValueError("category + age weights must stay below the smallest severity gap")
        tier_sorted = sorted(list(self.tier_weights.values()) + [self.untiered_weight])
        tier_gaps = [b - a for a, b in zip(tier_sorted, tier_sorted[1:])]
        if tier_gaps and max(sev_sorted) + residual >= min(tier_gaps):
            raise ValueError("severity + residual weights must stay below the smallest tier gap")


@dataclass(frozen=True)
class EngineConfig:
    scoring: ScoringWeights = field(default_factory=ScoringWeights)
    rollup_min_counts: dict[str, int] = field(default_factory=dict)


def _require(payload: dict[str, Any], key: str, expected_type: type) -> Any:
    if key not in payload:
        raise ValueError(f"Missing required field '{key}' in engine config")
    value = payload[key]
    if expected_type is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' must be int")
        return value
    if not isinstance(value, expected_type):
        raise ValueError(f"Field '{key}' must be {expected_type.__name__}")
    return value


def _enum_weights(payload: dict[str, Any], key: str, enum_type: type, defaults: dict) -> dict:
    if key not in payload:
        return dict(defaults)
    raw = _require(payload, key, dict)
    weights = dict(defaults)
    for name in raw:
        try:
            member = enum_type(name)
        except ValueError:
            raise ValueError(f"Unknown {key} entry: {name}") from None
        weights[member] = _require(raw, name, int)
    return weights


def parse_engine_config(payload: dict[str, Any]) -> EngineConfig:
    if not isinstance(payload, dict):
        raise ValueError("Engine config must be a JSON object")

    scoring_payload: dict[str, Any] = {}
    if "scoring" in payload:
        scoring_payload = _require(payload, "scoring", dict)

    defaults = ScoringWeights()
    scoring = ScoringWeights(
        tier_weights=_enum_weights(scoring_payload, "tier_weights", DecisionTier, defaults.tier_weights),
        severity_weights=_enum_weights(
            scoring_payload, "severity_weights", Severity, defaults.severity_weights
        ),
        category_weights=_enum_weights(
            scoring_payload, "category_weights", Category, defaults.category_weights
        ),
        age_weight_per_day=(
            _require(scoring_payload, "age_weight_per_day", int)
            if "age_weight_per_day" in scoring_payload
            else defaults.age_weight_per_day
        ),
        age_cap_days=(
            _require(scoring_payload, "age_cap_days", int)
            if "age_cap_days" in scoring_payload
            else defaults.age_cap_days
        ),
        rollup_bonus_per_item=(
            _require(scoring_payload, "rollup_bonus_per_item", int)
            if "rollup_bonus_per_item" in scoring_payload
            else defaults.rollup_bonus_per_item
        ),
    )
    scoring.validate()

    rollup_min_counts: dict[str, int] = {}
    if "rollup_min_counts" in payload:
        raw_counts = _require(payload, "rollup_min_counts", dict)
        for title_key in raw_counts:
            count = _require(raw_counts, title_key, int)
            if count < 1:
                raise ValueError(f"rollup_min_counts['{title_key}'] must be >= 1")
            rollup_min_counts[title_key] = count

    return EngineConfig(scoring=scoring, rollup_min_counts=rollup_min_counts)


def load_engine_config(path: str | Path) -> EngineConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"Engine config not found: {config_path}")
    payload = json.loads(config_path.read_text(encoding="utf-8"))
    return parse_engine_config(payload)
