"""Signal: OVERDUE_DELIVERABLE.

Category:
  - Project / commitments.

Contract:
  - Inputs: project records carrying nested deliverables.
  - Output: at most MAX_ITEMS items, one per project, most overdue first.

Trigger summary:
  - Project status is active (planning, in_progress, blocked) or unset.
  - Deliverable is not completed and its due_date has passed by at least
    ORANGE_DAYS whole days; RED_DAYS or more is red.
  - Each project reports its most overdue deliverable plus an open-item count.

Edge cases:
  - Deliverables without a parseable due_date are ignored.
  - Projects without an id are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from tradedesk.core.decision.enums import SignalType
from tradedesk.core.decision.models import Cta, DecisionItem, EntityContext, make_chips
from .base import age_chip, build_item, ramp_severity
from .records import days_since, flag, text
from .snapshot import DecisionSnapshot, Record

ORANGE_DAYS = 1
RED_DAYS = 3
MAX_ITEMS = 4
ACTIVE_STATUSES = {"planning", "in_progress", "blocked"}


@dataclass(frozen=True)
class _Overdue:
    project_id: str
    project_name: Optional[str]
    deliverable_id: str
    title: Optional[str]
    due_date: str
    overdue_days: int
    open_count: int


def _project_overdue(project: Record, now: datetime) -> Optional[_Overdue]:
    project_id = text(project, "id")
    if project_id is None:
        return None
    status = text(project, "status")
    if status is not None and status.lower() not in ACTIVE_STATUSES:
        return None
    deliverables = project.get("deliverables")
    if not isinstance(deliverables, (list, tuple)):
        return None

    worst: Optional[tuple[int, str, Any]] = None
    open_count = 0
    for deliverable in deliverables:
        if not isinstance(deliverable, Mapping):
            continue
        if flag(deliverable, "completed"):
            continue
        days = days_since(deliverable.get("due_date"), now)
        if days is None or days < ORANGE_DAYS:
            continue
        open_count += 1
        deliverable_id = text(deliverable, "id") or ""
        if worst is None or (days, deliverable_id) > (worst[0], worst[1]):
            worst = (days, deliverable_id, deliverable)
    if worst is None:
        return None

    days, deliverable_id, deliverable = worst
    return _Overdue(
        project_id=project_id,
        project_name=text(project, "name"),
        deliverable_id=deliverable_id,
        title=text(deliverable, "title"),
        due_date=text(deliverable, "due_date") or "",
        overdue_days=days,
        open_count=open_count,
    )


def eval_deliverable_overdue(snapshot: DecisionSnapshot, now: datetime) -> list[DecisionItem]:
    overdue: list[_Overdue] = []
    for project in snapshot.projects:
        found = _project_overdue(project, now)
        if found is not None:
            overdue.append(found)
    overdue.sort(key=lambda o: (-o.overdue_days, o.project_id))

    items: list[DecisionItem] = []
    for entry in overdue[:MAX_ITEMS]:
        severity = ramp_severity(entry.overdue_days, ORANGE_DAYS, RED_DAYS)
        if severity is None:
            continue
        title = entry.title or "Deliverable"
        items.append(
            build_item(
                SignalType.OVERDUE_DELIVERABLE,
                entry.project_id,
                severity,
                title=f"{title} overdue",
                description=f"Due {entry.overdue_days}d ago.",
                context=EntityContext(project_id=entry.project_id),
                chips=make_chips(
                    ("Project", entry.project_name),
                    ("Overdue", age_chip(entry.overdue_days)),
                    ("Open items", entry.open_count if entry.open_count > 1 else None),
                ),
                ctas=[
                    Cta(
                        label="Open",
                        action_key="OPEN_PROJECT",
                        payload={
                            "projectId": entry.project_id,
                            "deliverableId": entry.deliverable_id or None,
                        },
                    )
                ],
                created_at=entry.due_date or None,
            )
        )
    return items
