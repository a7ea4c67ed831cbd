"""Construct a fully wired app instance for running the decision engine.

Responsibilities:
  - Assemble snapshot provider, evaluator registry, and pipeline from config.
Must not:
  - Implement evaluator or postprocess logic; composition only.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from tradedesk.app_api.facade import DecisionEngineApplication
from tradedesk.app_api.ports import SnapshotProvider
from tradedesk.app_api.providers.json_snapshot_provider import JsonSnapshotProvider
from tradedesk.core.decision.config import EngineConfig, load_engine_config
from tradedesk.core.evaluators.registry import build_default_registry
from tradedesk.core.postprocess.pipeline import build_pipeline_from_config


def build_decision_engine_app(
    snapshot_path: Optional[str | Path] = None,
    config_path: Optional[str | Path] = None,
    snapshot_provider: Optional[SnapshotProvider] = None,
    debug_fn: Optional[Callable[[str], None]] = None,
) -> DecisionEngineApplication:
    """
    Composition root: build and wire the snapshot provider, evaluator registry,
    and postprocess pipeline, and return the application facade.
    """
    if snapshot_provider is None:
        if snapshot_path is None:
            raise ValueError("snapshot_path or snapshot_provider must be provided")
        snapshot_provider = JsonSnapshotProvider(snapshot_path)

    config = load_engine_config(config_path) if config_path is not None else EngineConfig()

    return DecisionEngineApplication(
        snapshot_provider=snapshot_provider,
        registry=build_default_registry(),
        pipeline=build_pipeline_from_config(config),
        debug_fn=debug_fn,
    )
