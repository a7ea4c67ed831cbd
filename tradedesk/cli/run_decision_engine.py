from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from typing import Sequence

from tradedesk.app_api.factories.build_app import build_decision_engine_app
from tradedesk.core.decision.models import DecisionItem, item_to_dict
from tradedesk.core.engine.selectors import (
    DecisionSlice,
    select_for_asset,
    select_for_dashboard,
    select_for_portfolio,
    select_top_for_dashboard,
)
from tradedesk.core.evaluators.records import iso, parse_timestamp
from tradedesk.cli._debug_utils import _dbg, _debug_fn, _fmt


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the decision engine over a JSON snapshot")
    parser.add_argument("--snapshot", required=True, help="Snapshot JSON path")
    parser.add_argument("--now", default=None, help="Reference time (ISO-8601); defaults to current UTC time")
    parser.add_argument("--config", default=None, help="Optional engine config JSON path")
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument("--asset", default=None, help="Show items for one asset id")
    scope.add_argument("--portfolio", default=None, help="Show items for one portfolio id")
    parser.add_argument("--top", type=int, default=None, help="Curated dashboard limit for action items")
    parser.add_argument("--json", action="store_true", dest="as_json", help="Print JSON instead of a table")
    parser.add_argument("--debug", action="store_true", help="Print pipeline debug lines")
    return parser.parse_args(argv)


def _resolve_now(raw: str | None) -> datetime:
    if raw is None:
        return datetime.now(timezone.utc)
    now = parse_timestamp(raw)
    if now is None:
        raise SystemExit(f"ERROR: invalid --now value: {raw}")
    return now


def _print_section(name: str, items: Sequence[DecisionItem]) -> None:
    print(f"{name} count={len(items)}")
    print("id | severity | tier | score | title")
    for item in items:
        tier = item.decision_tier.value if item.decision_tier is not None else None
        print(
            f"{_fmt(item.id)} | "
            f"{_fmt(item.severity.value)} | "
            f"{_fmt(tier)} | "
            f"{_fmt(item.sort_score)} | "
            f"{_fmt(item.title)}"
        )
        for child in item.children:
            print(f"  - {child.id} | {child.severity.value} | {child.title}")


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    if args.top is not None and args.top < 1:
        raise SystemExit("ERROR: --top must be >= 1")

    now = _resolve_now(args.now)
    _dbg(args, f"snapshot={args.snapshot} config={args.config} now={iso(now)}")

    try:
        app = build_decision_engine_app(
            snapshot_path=args.snapshot,
            config_path=args.config,
            debug_fn=_debug_fn(args),
        )
        result = app.run(now)
    except ValueError as exc:
        print(f"SUMMARY status=ERROR message={exc}")
        raise SystemExit(2)

    if args.asset is not None:
        view: DecisionSlice = select_for_asset(result, args.asset)
    elif args.portfolio is not None:
        view = select_for_portfolio(result, args.portfolio)
    else:
        view = select_for_dashboard(result)

    action = view.action
    if args.top is not None:
        action = select_top_for_dashboard(action, limit=args.top)

    if args.as_json:
        payload = {
            "actionItems": [item_to_dict(item) for item in action],
            "intelItems": [item_to_dict(item) for item in view.intel],
            "meta": result.to_dict()["meta"],
        }
        print(json.dumps(payload, indent=2, sort_keys=True))
        return

    print(
        f"SUMMARY generated_at={result.meta.generated_at} "
        f"candidates={result.meta.candidate_count} "
        f"action={len(action)} intel={len(view.intel)}"
    )
    _print_section("ACTION_ITEMS", action)
    _print_section("INTEL_ITEMS", view.intel)


if __name__ == "__main__":
    main()
