from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tradedesk.core.decision.enums import Severity, SignalType
from tradedesk.core.evaluators.records import iso
from tradedesk.core.evaluators.snapshot import DecisionSnapshot
from tradedesk.core.evaluators.thesis_stale import eval_thesis_stale

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _days_ago(days: int) -> str:
    return iso(NOW - timedelta(days=days))


def _snapshot(*updates: dict) -> DecisionSnapshot:
    return DecisionSnapshot(thesis_updates=tuple(updates))


@pytest.mark.parametrize(
    "days, expected",
    [
        (89, None),
        (90, Severity.ORANGE),
        (179, Severity.ORANGE),
        (180, Severity.RED),
    ],
)
def test_thesis_stale_threshold_boundaries(days: int, expected: Severity | None) -> None:
    items = eval_thesis_stale(_snapshot({"asset_id": "AAPL", "updated_at": _days_ago(days)}), NOW)

    if expected is None:
        assert items == []
        return
    assert len(items) == 1
    assert items[0].severity is expected
    assert items[0].signal_type is SignalType.THESIS_STALE
    assert items[0].id == "thesis-stale-AAPL"


def test_thesis_stale_uses_latest_update_per_asset() -> None:
    items = eval_thesis_stale(
        _snapshot(
            {"asset_id": "AAPL", "updated_at": _days_ago(300)},
            {"asset_id": "AAPL", "updated_at": _days_ago(10)},
            {"asset_id": "MSFT", "updated_at": _days_ago(120), "asset_symbol": "MSFT"},
        ),
        NOW,
    )

    assert [item.context.asset_id for item in items] == ["MSFT"]
    assert items[0].context.asset_ticker == "MSFT"
    assert [(c.label, c.value) for c in items[0].chips] == [("Ticker", "MSFT"), ("Age", "120d")]
    assert items[0].ctas[0].action_key == "OPEN_ASSET_UPDATE_THESIS"
    assert items[0].ctas[0].payload == {"assetId": "MSFT"}


def test_thesis_stale_missing_ticker_drops_chip() -> None:
    items = eval_thesis_stale(_snapshot({"asset_id": "a9", "updated_at": _days_ago(200)}), NOW)

    assert [c.label for c in items[0].chips] == ["Age"]
    assert items[0].context.asset_ticker is None


def test_thesis_stale_reads_nested_asset_symbol() -> None:
    items = eval_thesis_stale(
        _snapshot({"asset_id": "a9", "updated_at": _days_ago(95), "assets": {"symbol": "NVDA"}}),
        NOW,
    )

    assert items[0].context.asset_ticker == "NVDA"
