"""Domain enums for decision items and signal metadata.

Responsibilities:
  - Define Surface, Severity, Category, DecisionTier, and SignalType identifiers.
  - Provide per-signal metadata (title key, surface, category, tier).

Invariants:
  - Enum values must remain stable; SignalType values are the item id prefixes.
  - SIGNAL_METADATA must cover every SignalType exactly once.
"""

from __future__ import annotations

from enum import Enum


class Surface(Enum):
    ACTION = "action"
    INTEL = "intel"


class Severity(Enum):
    GRAY = "gray"
    ORANGE = "orange"
    RED = "red"


# Ordered urgency; only ever compared, never displayed.
SEVERITY_WEIGHT: dict[Severity, int] = {
    Severity.GRAY: 1,
    Severity.ORANGE: 2,
    Severity.RED: 3,
}


class Category(Enum):
    PROCESS = "process"
    RISK = "risk"
    PROJECT = "project"
    ALPHA = "alpha"
    CATALYST = "catalyst"


class DecisionTier(Enum):
    CAPITAL = "capital"
    INTEGRITY = "integrity"
    COVERAGE = "coverage"


# Value is the id prefix every item of this signal starts with.
class SignalType(Enum):
    PROPOSAL_AWAITING_DECISION = "a1-proposal"
    EXECUTION_NOT_CONFIRMED = "a2-execution"
    IDEA_NOT_SIMULATED = "a3-unsimulated"
    OVERDUE_DELIVERABLE = "a4-deliverable"
    RATING_NO_FOLLOWUP = "i1-rating"
    HIGH_EV_NO_IDEA = "i3-ev"
    THESIS_STALE = "thesis-stale"

    @property
    def title_key(self) -> str:
        return self.name

    @classmethod
    def from_item_id(cls, item_id: str) -> "SignalType | None":
        for signal_type in cls:
            if item_id.startswith(signal_type.value + "-"):
                return signal_type
        return None


SIGNAL_METADATA: dict[SignalType, dict[str, object]] = {
    SignalType.PROPOSAL_AWAITING_DECISION: {
        "surface": Surface.ACTION,
        "category": Category.PROCESS,
        "tier": DecisionTier.CAPITAL,
        "title": "Proposal Awaiting Decision",
    },
    SignalType.EXECUTION_NOT_CONFIRMED: {
        "surface": Surface.ACTION,
        "category": Category.PROCESS,
        "tier": DecisionTier.CAPITAL,
        "title": "Execution Not Confirmed",
    },
    SignalType.IDEA_NOT_SIMULATED: {
        "surface": Surface.ACTION,
        "category": Category.PROCESS,
        "tier": DecisionTier.CAPITAL,
        "title": "Idea Not Simulated",
    },
    SignalType.OVERDUE_DELIVERABLE: {
        "surface": Surface.ACTION,
        "category": Category.PROJECT,
        "tier": DecisionTier.INTEGRITY,
        "title": "Deliverable Overdue",
    },
    SignalType.RATING_NO_FOLLOWUP: {
        "surface": Surface.ACTION,
        "category": Category.RISK,
        "tier": DecisionTier.INTEGRITY,
        "title": "Rating Changed, No Follow-up",
    },
    SignalType.HIGH_EV_NO_IDEA: {
        "surface": Surface.INTEL,
        "category": Category.ALPHA,
        "tier": DecisionTier.COVERAGE,
        "title": "High EV, No Active Idea",
    },
    SignalType.THESIS_STALE: {
        "surface": Surface.ACTION,
        "category": Category.RISK,
        "tier": DecisionTier.COVERAGE,
        "title": "Thesis May Be Stale",
    },
}


def signal_surface(signal_type: SignalType) -> Surface:
    return SIGNAL_METADATA[signal_type]["surface"]  # type: ignore[return-value]


def signal_category(signal_type: SignalType) -> Category:
    return SIGNAL_METADATA[signal_type]["category"]  # type: ignore[return-value]


def signal_tier(signal_type: SignalType) -> DecisionTier:
    return SIGNAL_METADATA[signal_type]["tier"]  # type: ignore[return-value]


def signal_title(signal_type: SignalType) -> str:
    return str(SIGNAL_METADATA[signal_type]["title"])


_missing = [st for st in SignalType if st not in SIGNAL_METADATA]
if _missing:
    raise RuntimeError(f"Missing SIGNAL_METADATA for: {[m.value for m in _missing]}")

_extra = [k for k in SIGNAL_METADATA.keys() if k not in set(SignalType)]
if _extra:
    raise RuntimeError(f"Extra SIGNAL_METADATA keys: {[e.value for e in _extra]}")
