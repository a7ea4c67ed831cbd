from __future__ import annotations

from tradedesk.core.decision.enums import Category, Severity, SignalType, Surface
from tradedesk.core.decision.models import DecisionItem, EntityContext
from tradedesk.core.evaluators.base import build_item
from tradedesk.core.postprocess.conflicts import suppress_conflicts
from tradedesk.core.postprocess.dedup import dedup, dedup_key, signal_token


def _item(
    signal_type: SignalType,
    entity_id: str,
    severity: Severity = Severity.ORANGE,
    description: str = "",
    **context: str,
) -> DecisionItem:
    return build_item(
        signal_type,
        entity_id,
        severity,
        description=description,
        context=EntityContext(**context),
    )


def test_dedup_keeps_red_regardless_of_order() -> None:
    orange = _item(SignalType.THESIS_STALE, "AAPL", Severity.ORANGE, "old", asset_id="AAPL")
    red = _item(SignalType.THESIS_STALE, "AAPL", Severity.RED, "new", asset_id="AAPL")

    assert dedup([orange, red]) == [red]
    assert dedup([red, orange]) == [red]


def test_dedup_tie_keeps_first_seen() -> None:
    first = _item(SignalType.THESIS_STALE, "AAPL", Severity.ORANGE, "first", asset_id="AAPL")
    second = _item(SignalType.THESIS_STALE, "AAPL", Severity.ORANGE, "second", asset_id="AAPL")

    assert dedup([first, second]) == [first]


def test_dedup_is_idempotent() -> None:
    items = [
        _item(SignalType.THESIS_STALE, "AAPL", Severity.ORANGE, asset_id="AAPL"),
        _item(SignalType.THESIS_STALE, "AAPL", Severity.RED, asset_id="AAPL"),
        _item(SignalType.THESIS_STALE, "MSFT", Severity.ORANGE, asset_id="MSFT"),
        _item(SignalType.IDEA_NOT_SIMULATED, "t1", asset_id="AAPL", trade_idea_id="t1"),
        _item(SignalType.IDEA_NOT_SIMULATED, "t2", asset_id="AAPL", trade_idea_id="t2"),
    ]

    once = dedup(items)

    assert dedup(once) == once
    assert len(once) == 4


def test_dedup_key_separates_signal_types_on_same_entity() -> None:
    rating = _item(SignalType.RATING_NO_FOLLOWUP, "r1", asset_id="AAPL")
    thesis = _item(SignalType.THESIS_STALE, "AAPL", asset_id="AAPL")

    assert dedup_key(rating) != dedup_key(thesis)
    assert len(dedup([rating, thesis])) == 2


def test_signal_token_falls_back_to_id_prefix_for_unknown_producers() -> None:
    item = DecisionItem(
        id="zz-custom-42",
        surface=Surface.ACTION,
        severity=Severity.GRAY,
        category=Category.CATALYST,
        title_key="CUSTOM",
        title="Custom",
        description="",
    )

    assert signal_token(item) == "zz-custom"
    assert dedup_key(item) == "zz-custom:catalyst::::"


def test_execution_pending_suppresses_only_its_own_proposal() -> None:
    execution = _item(SignalType.EXECUTION_NOT_CONFIRMED, "T1", asset_id="A", trade_idea_id="T1")
    proposal_t1 = _item(SignalType.PROPOSAL_AWAITING_DECISION, "T1", asset_id="A", trade_idea_id="T1")
    proposal_t2 = _item(SignalType.PROPOSAL_AWAITING_DECISION, "T2", asset_id="A", trade_idea_id="T2")

    result = suppress_conflicts([proposal_t1, execution, proposal_t2])

    assert result == [execution, proposal_t2]


def test_proposal_and_rating_followup_are_independent() -> None:
    proposal = _item(SignalType.PROPOSAL_AWAITING_DECISION, "T1", asset_id="A", trade_idea_id="T1")
    rating = _item(SignalType.RATING_NO_FOLLOWUP, "r1", asset_id="A")

    assert suppress_conflicts([proposal, rating]) == [proposal, rating]
    assert suppress_conflicts([rating, proposal]) == [rating, proposal]


def test_open_idea_suppresses_high_ev_on_same_asset_only() -> None:
    idea = _item(SignalType.IDEA_NOT_SIMULATED, "t1", asset_id="A", trade_idea_id="t1")
    ev_same = _item(SignalType.HIGH_EV_NO_IDEA, "A", Severity.GRAY, asset_id="A")
    ev_other = _item(SignalType.HIGH_EV_NO_IDEA, "B", Severity.GRAY, asset_id="B")

    assert suppress_conflicts([ev_same, idea, ev_other]) == [idea, ev_other]


def test_items_without_asset_are_never_suppressed() -> None:
    execution = _item(SignalType.EXECUTION_NOT_CONFIRMED, "T1", trade_idea_id="T1")
    proposal = _item(SignalType.PROPOSAL_AWAITING_DECISION, "T1", trade_idea_id="T1")

    assert suppress_conflicts([execution, proposal]) == [execution, proposal]
