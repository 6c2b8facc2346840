# sandfleet/services/analytics.py
"""
Fleet analytics over an already-fetched batch of vehicles and incidents.

Every function here is pure: no session, no clock (callers pass the range), so the
same batch always yields the same numbers. Records may be ORM rows or plain dicts
exposing the same snake_case names.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sandfleet.models.incident import OPEN_STATUSES

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Status weights for the compliance score; anything else counts as UNKNOWN_WEIGHT
COMPLIANCE_WEIGHTS = {"active": 1.0, "inactive": 0.6, "flagged": 0.4, "suspended": 0.3}
UNKNOWN_WEIGHT = 0.5


# ---------- small utils ----------
def _get(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return _as_datetime(parsed)
    raise TypeError(f"not a timestamp: {value!r}")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), unlike round()."""
    return int(math.floor(value + 0.5))


def percent(part: int, total: int) -> int:
    return round_half_up(part / max(total, 1) * 100)


# ---------- range filtering ----------
def filter_by_date_range(
    items: Iterable[Any],
    start: Optional[date],
    end: Optional[date],
    *,
    field: str = "created_at",
) -> List[Any]:
    """
    Keep items whose `field` falls in [start 00:00, end 23:59:59.999999].
    A missing bound is open. Items without a timestamp are dropped when a bound is set.
    """
    lo = datetime.combine(start, time.min) if start else None
    hi = datetime.combine(end, time.max) if end else None

    out = []
    for item in items:
        ts = _as_datetime(_get(item, field))
        if ts is None:
            if lo is None and hi is None:
                out.append(item)
            continue
        if lo is not None and ts < lo:
            continue
        if hi is not None and ts > hi:
            continue
        out.append(item)
    return out


# ---------- monthly series ----------
@dataclass
class MonthBucket:
    year: int
    month: int
    label: str
    incidents: int = 0
    resolved: int = 0
    vehicles: int = 0


def _months_between(start: date, end: date) -> List[tuple]:
    months = []
    y, m = start.year, start.month
    while (y, m) <= (end.year, end.month):
        months.append((y, m))
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    return months


def monthly_series(
    start: date,
    end: date,
    incidents: Sequence[Any],
    vehicles: Sequence[Any],
) -> List[MonthBucket]:
    """
    One bucket per calendar month from start's month through end's month.
    Empty months stay in the series with zero counts.
    """
    buckets = {
        (y, m): MonthBucket(year=y, month=m, label=f"{MONTH_LABELS[m - 1]} {y}")
        for y, m in _months_between(start, end)
    }

    for inc in incidents:
        ts = _as_datetime(_get(inc, "created_at"))
        bucket = buckets.get((ts.year, ts.month)) if ts else None
        if bucket is None:
            continue
        bucket.incidents += 1
        if _get(inc, "status") == "resolved":
            bucket.resolved += 1

    for veh in vehicles:
        ts = _as_datetime(_get(veh, "created_at"))
        bucket = buckets.get((ts.year, ts.month)) if ts else None
        if bucket is not None:
            bucket.vehicles += 1

    return list(buckets.values())


# ---------- distributions ----------
def distribution(items: Sequence[Any], field: str) -> Dict[str, Dict[str, int]]:
    """
    Group by `field`: {value: {"count": n, "percent": round(n / total * 100)}}.
    Groups keep first-seen order. Total is floored to 1 so an empty batch yields {}.
    """
    counts: Dict[str, int] = {}
    for item in items:
        key = _get(item, field)
        key = "unknown" if key is None else str(key)
        counts[key] = counts.get(key, 0) + 1

    total = len(items)
    return {k: {"count": v, "percent": percent(v, total)} for k, v in counts.items()}


def weekday_activity(incidents: Iterable[Any]) -> Dict[str, list]:
    """Incidents per weekday of creation, Monday first."""
    counts = [0] * 7
    for inc in incidents:
        ts = _as_datetime(_get(inc, "created_at"))
        if ts is not None:
            counts[ts.weekday()] += 1
    return {"labels": list(WEEKDAY_LABELS), "counts": counts}


# ---------- scores ----------
def compliance_score(vehicles: Sequence[Any]) -> int:
    """Weighted status mix as a rounded percentage; 0 for an empty fleet."""
    if not vehicles:
        return 0
    score = sum(
        COMPLIANCE_WEIGHTS.get(_get(v, "status"), UNKNOWN_WEIGHT) for v in vehicles
    )
    return round_half_up(score / len(vehicles) * 100)


def summary_totals(vehicles: Sequence[Any], incidents: Sequence[Any]) -> Dict[str, int]:
    resolved = sum(1 for i in incidents if _get(i, "status") == "resolved")
    return {
        "totalVehicles": len(vehicles),
        "activeIncidents": sum(1 for i in incidents if _get(i, "status") in OPEN_STATUSES),
        "resolutionRate": round_half_up(resolved / len(incidents) * 100) if incidents else 0,
        "complianceScore": compliance_score(vehicles),
    }


def status_counts(items: Iterable[Any], statuses: Sequence[str]) -> Dict[str, int]:
    """Count per known status, zero-filled, in the given order."""
    out = {s: 0 for s in statuses}
    for item in items:
        s = _get(item, "status")
        if s in out:
            out[s] += 1
    return out


# ---------- composite ----------
def build_analytics(
    vehicles: Sequence[Any],
    incidents: Sequence[Any],
    start: date,
    end: date,
) -> Dict[str, Any]:
    """Everything the analytics page shows, for records created within [start, end]."""
    in_range_vehicles = filter_by_date_range(vehicles, start, end)
    in_range_incidents = filter_by_date_range(incidents, start, end)

    return {
        "range": {"start": start.isoformat(), "end": end.isoformat()},
        "totals": summary_totals(in_range_vehicles, in_range_incidents),
        "monthly": [
            asdict(b) for b in monthly_series(start, end, in_range_incidents, in_range_vehicles)
        ],
        "incidentTypes": distribution(in_range_incidents, "incident_type"),
        "vehicleStatuses": distribution(in_range_vehicles, "status"),
        "weekdayActivity": weekday_activity(in_range_incidents),
    }
