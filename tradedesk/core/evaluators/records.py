"""Tolerant accessors over raw domain records.

Responsibilities:
  - Read optional fields from loosely shaped mappings without raising.
  - Parse ISO timestamps and compute whole elapsed days.

Edge cases:
  - Missing keys, None, wrong types and unparseable timestamps all yield None.
  - Naive timestamps are treated as UTC.
  - Timestamps whose UTC equivalent falls outside the datetime range yield None.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

SECONDS_PER_DAY = 86400


def text(record: Mapping[str, Any], key: str) -> Optional[str]:
    value = record.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def number(record: Mapping[str, Any], key: str) -> Optional[float]:
    value = record.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if math.isnan(value):
            return None
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return None
        return None if math.isnan(parsed) else parsed
    return None


def flag(record: Mapping[str, Any], key: str) -> bool:
    return record.get(key) is True


def nested_text(record: Mapping[str, Any], outer: str, key: str) -> Optional[str]:
    inner = record.get(outer)
    if not isinstance(inner, Mapping):
        return None
    return text(inner, key)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def timestamp(record: Mapping[str, Any], key: str) -> Optional[datetime]:
    return parse_timestamp(record.get(key))


def days_between(start: datetime, end: datetime) -> int:
    return math.floor((end - start).total_seconds() / SECONDS_PER_DAY)


def days_since(value: Any, now: datetime) -> Optional[int]:
    ts = parse_timestamp(value)
    if ts is None:
        return None
    return days_between(ts, ensure_aware(now))


def ensure_aware(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def iso(ts: Optional[datetime]) -> Optional[str]:
    if ts is None:
        return None
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
