from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from tradedesk.app_api.factories.build_app import build_decision_engine_app
from tradedesk.app_api.providers.json_snapshot_provider import (
    JsonSnapshotProvider,
    StaticSnapshotProvider,
)
from tradedesk.cli._debug_utils import _dbg, _debug_fn
from tradedesk.cli.run_decision_engine import main
from tradedesk.core.evaluators.records import iso
from tradedesk.core.evaluators.snapshot import DecisionSnapshot

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
NOW_ISO = "2026-03-01T12:00:00Z"


def _days_ago(days: int) -> str:
    return iso(NOW - timedelta(days=days))


def _write_snapshot(tmp_path) -> str:
    payload = {
        "thesisUpdates": [
            {"asset_id": "AAPL", "asset_symbol": "AAPL", "updated_at": _days_ago(200)},
        ],
        "tradeIdeas": [
            {
                "id": "t1",
                "asset_id": "NVDA",
                "portfolio_id": "pf1",
                "portfolio_name": "Core",
                "stage": "idea",
                "created_at": _days_ago(2),
            }
        ],
        "assets": [{"id": "IBM", "symbol": "IBM", "expected_return": 0.2}],
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_dbg_prefix_and_suppression(capsys) -> None:
    class Args:
        debug = True

    _dbg(Args(), "hello")
    out = capsys.readouterr().out.strip()
    assert out == "[debug] hello"

    class ArgsOff:
        debug = False

    _dbg(ArgsOff(), "silent")
    assert capsys.readouterr().out == ""
    assert _debug_fn(ArgsOff()) is None


def test_json_provider_errors(tmp_path) -> None:
    with pytest.raises(ValueError, match="not found"):
        JsonSnapshotProvider(tmp_path / "missing.json").get_snapshot()

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        JsonSnapshotProvider(bad).get_snapshot()


def test_build_app_requires_a_snapshot_source() -> None:
    with pytest.raises(ValueError, match="snapshot_path"):
        build_decision_engine_app()


def test_app_runs_with_static_provider() -> None:
    snapshot = DecisionSnapshot.from_payload(
        {"thesis_updates": [{"asset_id": "AAPL", "updated_at": _days_ago(95)}]}
    )
    app = build_decision_engine_app(snapshot_provider=StaticSnapshotProvider(snapshot))

    result = app.run(NOW)

    assert [item.id for item in result.action_items] == ["thesis-stale-AAPL"]


def test_cli_table_output(tmp_path, capsys) -> None:
    main(["--snapshot", _write_snapshot(tmp_path), "--now", NOW_ISO])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"SUMMARY generated_at={NOW_ISO} candidates=3 action=2 intel=1"
    assert lines[1] == "ACTION_ITEMS count=2"
    assert lines[2] == "id | severity | tier | score | title"
    assert lines[3].startswith("a3-unsimulated-t1 | orange | capital | ")
    assert lines[4].startswith("thesis-stale-AAPL | red | coverage | ")
    assert "INTEL_ITEMS count=1" in lines


def test_cli_json_output_with_asset_filter(tmp_path, capsys) -> None:
    main(["--snapshot", _write_snapshot(tmp_path), "--now", NOW_ISO, "--asset", "AAPL", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert [item["id"] for item in payload["actionItems"]] == ["thesis-stale-AAPL"]
    assert payload["intelItems"] == []
    assert payload["meta"]["generatedAt"] == NOW_ISO


def test_cli_debug_lines(tmp_path, capsys) -> None:
    main(["--snapshot", _write_snapshot(tmp_path), "--now", NOW_ISO, "--debug"])

    out = capsys.readouterr().out
    assert "[debug] EVALUATOR=thesis_stale items=1" in out
    assert "[debug] STAGE=dedup in=3 out=3" in out


def test_cli_reports_config_errors(tmp_path, capsys) -> None:
    config = tmp_path / "engine.json"
    config.write_text(json.dumps({"rollup_min_counts": {"THESIS_STALE": 0}}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--snapshot", _write_snapshot(tmp_path), "--now", NOW_ISO, "--config", str(config)])

    assert excinfo.value.code == 2
    assert capsys.readouterr().out.startswith("SUMMARY status=ERROR")


def test_cli_rejects_bad_now(tmp_path) -> None:
    with pytest.raises(SystemExit):
        main(["--snapshot", _write_snapshot(tmp_path), "--now", "yesterday"])
