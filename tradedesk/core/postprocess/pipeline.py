"""Explicit, ordered postprocess pipeline.

Responsibilities:
  - Run named stages (dedup → suppress → score → split → rollup → sort) in order.
  - Split items by surface at the named split stage.

Inputs/Outputs:
  - Inputs: candidate items from the evaluators and the reference time.
  - Outputs: PostprocessOutput with ordered action and intel lists.

Invariants:
  - Every stage maps a list of items to a list of items; none mutates input.
  - Shared stages (surfaces=None) run before the split stage, scoped stages
    after it; any other order is rejected at construction.
  - Same input and now always produce the same output order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, FrozenSet, Optional, Sequence

from tradedesk.core.decision.config import EngineConfig, ScoringWeights
from tradedesk.core.decision.enums import Surface
from tradedesk.core.decision.models import DecisionItem
from .conflicts import suppress_conflicts
from .dedup import dedup
from .rollup import RollupConfig, default_rollup_configs, rollup_items, with_min_counts
from .scoring import score_items, sort_items

StageFn = Callable[[Sequence[DecisionItem], datetime], list[DecisionItem]]

SPLIT_STAGE = "split"


def _identity(items: Sequence[DecisionItem], now: datetime) -> list[DecisionItem]:
    _ = now
    return list(items)


@dataclass(frozen=True)
class Stage:
    name: str
    apply: StageFn
    surfaces: Optional[FrozenSet[Surface]] = None
    is_split: bool = False

    @property
    def is_scoped(self) -> bool:
        return self.surfaces is not None


def split_stage() -> Stage:
    return Stage(SPLIT_STAGE, _identity, is_split=True)


@dataclass(frozen=True)
class PostprocessOutput:
    action_items: list[DecisionItem]
    intel_items: list[DecisionItem]


def _split_by_surface(items: Sequence[DecisionItem]) -> dict[Surface, list[DecisionItem]]:
    return {surface: [item for item in items if item.surface is surface] for surface in Surface}


class PostprocessPipeline:
    def __init__(self, stages: Sequence[Stage]) -> None:
        seen_split = False
        for stage in stages:
            if stage.is_split:
                if seen_split:
                    raise ValueError("Pipeline may contain only one split stage")
                if stage.is_scoped:
                    raise ValueError(f"Split stage '{stage.name}' must not be surface-scoped")
                seen_split = True
            elif stage.is_scoped and not seen_split:
                raise ValueError(f"Surface-scoped stage '{stage.name}' must run after the split stage")
            elif not stage.is_scoped and seen_split:
                raise ValueError(f"Shared stage '{stage.name}' must run before the split stage")
        self._stages = tuple(stages)

    @property
    def stage_names(self) -> list[str]:
        return [stage.name for stage in self._stages]

    def run(
        self,
        items: Sequence[DecisionItem],
        now: datetime,
        debug_fn: Optional[Callable[[str], None]] = None,
    ) -> PostprocessOutput:
        shared: list[DecisionItem] = list(items)
        by_surface: Optional[dict[Surface, list[DecisionItem]]] = None

        for stage in self._stages:
            if stage.is_split:
                before = len(shared)
                by_surface = _split_by_surface(stage.apply(shared, now))
                if debug_fn is not None:
                    counts = " ".join(
                        f"{surface.value}={len(by_surface[surface])}" for surface in Surface
                    )
                    debug_fn(f"STAGE={stage.name} in={before} {counts}")
                continue

            if by_surface is None:
                before = len(shared)
                shared = stage.apply(shared, now)
                if debug_fn is not None:
                    debug_fn(f"STAGE={stage.name} in={before} out={len(shared)}")
                continue

            for surface in Surface:
                if surface not in stage.surfaces:
                    continue
                before = len(by_surface[surface])
                by_surface[surface] = stage.apply(by_surface[surface], now)
                if debug_fn is not None:
                    debug_fn(
                        f"STAGE={stage.name} surface={surface.value} "
                        f"in={before} out={len(by_surface[surface])}"
                    )

        if by_surface is None:
            by_surface = _split_by_surface(shared)
        return PostprocessOutput(
            action_items=by_surface[Surface.ACTION],
            intel_items=by_surface[Surface.INTEL],
        )


def build_default_pipeline(
    weights: Optional[ScoringWeights] = None,
    rollup_configs: Optional[Sequence[RollupConfig]] = None,
) -> PostprocessPipeline:
    weights = weights or ScoringWeights()
    configs = list(rollup_configs) if rollup_configs is not None else default_rollup_configs()
    both = frozenset(Surface)
    return PostprocessPipeline(
        [
            Stage("dedup", dedup),
            Stage("suppress", suppress_conflicts),
            Stage("score", lambda items, now: score_items(items, now, weights)),
            split_stage(),
            Stage(
                "rollup",
                lambda items, now: rollup_items(items, now, configs, weights),
                surfaces=frozenset({Surface.ACTION}),
            ),
            Stage("sort", lambda items, now: sort_items(items, now, weights), surfaces=both),
        ]
    )


def build_pipeline_from_config(config: EngineConfig) -> PostprocessPipeline:
    configs = with_min_counts(default_rollup_configs(), config.rollup_min_counts)
    return build_default_pipeline(weights=config.scoring, rollup_configs=configs)


def postprocess(
    items: Sequence[DecisionItem],
    now: datetime,
    pipeline: Optional[PostprocessPipeline] = None,
    debug_fn: Optional[Callable[[str], None]] = None,
) -> PostprocessOutput:
    pipeline = pipeline or build_default_pipeline()
    return pipeline.run(items, now, debug_fn=debug_fn)
