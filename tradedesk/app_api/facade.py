from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from tradedesk.core.engine.evaluator import evaluate_and_postprocess
from tradedesk.core.engine.result import EngineResult
from tradedesk.core.evaluators.registry import EvaluatorRegistry
from tradedesk.core.postprocess.pipeline import PostprocessPipeline
from .ports import SnapshotProvider


class DecisionEngineApplication:
    def __init__(
        self,
        snapshot_provider: SnapshotProvider,
        registry: EvaluatorRegistry,
        pipeline: PostprocessPipeline,
        debug_fn: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._snapshot_provider = snapshot_provider
        self._registry = registry
        self._pipeline = pipeline
        self._debug_fn = debug_fn

    def run(self, now: Optional[datetime] = None) -> EngineResult:
        if now is None:
            now = datetime.now(timezone.utc)
        snapshot = self._snapshot_provider.get_snapshot()
        return evaluate_and_postprocess(
            snapshot,
            now,
            registry=self._registry,
            pipeline=self._pipeline,
            debug_fn=self._debug_fn,
        )
