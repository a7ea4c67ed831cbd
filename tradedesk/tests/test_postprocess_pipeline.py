from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tradedesk.core.decision.enums import Severity, SignalType, Surface
from tradedesk.core.decision.models import DecisionItem, EntityContext
from tradedesk.core.evaluators.base import build_item
from tradedesk.core.evaluators.records import iso
from tradedesk.core.postprocess.dedup import dedup
from tradedesk.core.postprocess.pipeline import (
    PostprocessPipeline,
    Stage,
    build_default_pipeline,
    postprocess,
    split_stage,
)
from tradedesk.core.postprocess.rollup import RollupConfig

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _item(signal_type: SignalType, entity_id: str, severity: Severity, **context: str) -> DecisionItem:
    return build_item(
        signal_type,
        entity_id,
        severity,
        description="",
        context=EntityContext(**context),
        created_at=iso(NOW - timedelta(days=1)),
    )


def test_default_pipeline_stage_order() -> None:
    assert build_default_pipeline().stage_names == [
        "dedup",
        "suppress",
        "score",
        "split",
        "rollup",
        "sort",
    ]


def _passthrough(items, now):
    return list(items)


def test_shared_stage_after_split_is_rejected() -> None:
    with pytest.raises(ValueError, match="Shared stage 'dedup'"):
        PostprocessPipeline([split_stage(), Stage("dedup", dedup)])


def test_scoped_stage_before_split_is_rejected() -> None:
    with pytest.raises(ValueError, match="Surface-scoped stage 'sort'"):
        PostprocessPipeline(
            [
                Stage("sort", _passthrough, surfaces=frozenset(Surface)),
                split_stage(),
            ]
        )


def test_duplicate_split_is_rejected() -> None:
    with pytest.raises(ValueError, match="only one split"):
        PostprocessPipeline([split_stage(), split_stage()])


def test_postprocess_splits_surfaces_and_scores() -> None:
    items = [
        _item(SignalType.HIGH_EV_NO_IDEA, "B", Severity.GRAY, asset_id="B"),
        _item(SignalType.THESIS_STALE, "A", Severity.RED, asset_id="A"),
        _item(SignalType.THESIS_STALE, "A", Severity.ORANGE, asset_id="A"),
        _item(SignalType.HIGH_EV_NO_IDEA, "C", Severity.GRAY, asset_id="C"),
    ]

    output = postprocess(items, NOW)

    assert [item.id for item in output.action_items] == ["thesis-stale-A"]
    assert output.action_items[0].severity is Severity.RED
    assert output.action_items[0].sort_score > 0
    assert [item.id for item in output.intel_items] == ["i3-ev-B", "i3-ev-C"]


def test_intel_items_are_never_rolled_up() -> None:
    config = RollupConfig(
        title_key=SignalType.HIGH_EV_NO_IDEA.title_key,
        min_count=1,
        make_title=lambda n: f"{n} ideas",
        make_description=lambda children, now: "",
        cta_label="Open",
        cta_action_key="OPEN",
    )
    items = [
        _item(SignalType.HIGH_EV_NO_IDEA, name, Severity.GRAY, asset_id=name) for name in "XYZ"
    ]

    output = build_default_pipeline(rollup_configs=[config]).run(items, NOW)

    assert len(output.intel_items) == 3
    assert all(not item.children for item in output.intel_items)


def test_pipeline_emits_stage_debug_lines() -> None:
    lines: list[str] = []
    items = [
        _item(SignalType.IDEA_NOT_SIMULATED, f"t{i}", Severity.ORANGE, asset_id=f"a{i}")
        for i in range(3)
    ]

    postprocess(items, NOW, debug_fn=lines.append)

    assert lines == [
        "STAGE=dedup in=3 out=3",
        "STAGE=suppress in=3 out=3",
        "STAGE=score in=3 out=3",
        "STAGE=split in=3 action=3 intel=0",
        "STAGE=rollup surface=action in=3 out=1",
        "STAGE=sort surface=action in=1 out=1",
        "STAGE=sort surface=intel in=0 out=0",
    ]
