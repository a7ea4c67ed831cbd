"""Decision engine evaluation for a single input snapshot.

Responsibilities:
  - Invoke every registered evaluator against the shared snapshot.
  - Run the postprocess pipeline over the concatenated candidates.
  - Package ordered action/intel lists with run metadata.

Inputs/Outputs:
  - Inputs: DecisionSnapshot (or a raw payload dict) and the reference time.
  - Outputs: EngineResult.

Invariants:
  - Pure over its inputs: no I/O, no shared mutable state between runs.
  - Same snapshot and now always produce the same ordering.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from tradedesk.core.evaluators.records import ensure_aware, iso
from tradedesk.core.evaluators.registry import EvaluatorRegistry, build_default_registry
from tradedesk.core.evaluators.snapshot import DecisionSnapshot
from tradedesk.core.postprocess.pipeline import PostprocessPipeline, build_default_pipeline
from .result import EngineMeta, EngineResult


def evaluate_and_postprocess(
    records: Union[DecisionSnapshot, Mapping[str, Any], None],
    now: datetime,
    registry: Optional[EvaluatorRegistry] = None,
    pipeline: Optional[PostprocessPipeline] = None,
    debug_fn: Optional[Callable[[str], None]] = None,
) -> EngineResult:
    snapshot = records if isinstance(records, DecisionSnapshot) else DecisionSnapshot.from_payload(records)
    now = ensure_aware(now)
    registry = registry or build_default_registry()
    pipeline = pipeline or build_default_pipeline()

    if debug_fn is not None:
        counts = " ".join(f"{k}={v}" for k, v in snapshot.record_counts().items())
        debug_fn(f"SNAPSHOT now={iso(now)} {counts}")

    candidates = registry.evaluate_all(snapshot, now, debug_fn=debug_fn)
    output = pipeline.run(candidates, now, debug_fn=debug_fn)

    return EngineResult(
        action_items=output.action_items,
        intel_items=output.intel_items,
        meta=EngineMeta(
            generated_at=iso(now) or "",
            candidate_count=len(candidates),
            action_count=len(output.action_items),
            intel_count=len(output.intel_items),
        ),
    )
