# sandfleet/services/reports/text_report.py
"""
Plain-text report rendering for download.

Output is deterministic for a given batch and range: records are listed in the
order they are passed in and timestamps are printed as `YYYY-MM-DD HH:MM` (UTC).
"""
from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from sandfleet.services.analytics import (
    _get,
    build_analytics,
    compliance_score,
    distribution,
    filter_by_date_range,
)

SECTIONS = ("vehicles", "incidents", "compliance")


# -----------------------------
# Helpers
# -----------------------------
def _fmt_ts(v: Any) -> str:
    if v is None:
        return "-"
    if isinstance(v, datetime):
        return v.strftime("%Y-%m-%d %H:%M")
    if isinstance(v, date):
        return v.isoformat()
    return str(v)


def _dash(v: Any) -> str:
    if v is None or v == "":
        return "-"
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def _range_label(start: Optional[date], end: Optional[date]) -> str:
    return f"{start.isoformat() if start else 'All'} to {end.isoformat() if end else 'Now'}"


def months_ago(d: date, n: int) -> date:
    """Same day n months earlier, clamped to the month's last day."""
    y, m = divmod(d.month - 1 - n, 12)
    year, month = d.year + y, m + 1
    return date(year, month, min(d.day, calendar.monthrange(year, month)[1]))


def report_filename(name: str, today: date) -> str:
    return f"{name}-{today.isoformat()}.txt"


# -----------------------------
# Sections
# -----------------------------
def render_vehicle_report(
    vehicles: Sequence[Any], start: Optional[date] = None, end: Optional[date] = None
) -> str:
    rows = filter_by_date_range(vehicles, start, end)
    lines = [f"Vehicle Records ({_range_label(start, end)})", ""]
    for v in rows:
        lines.append(
            f"- {_get(v, 'vehicle_number')} | {_get(v, 'vehicle_type')} | "
            f"cap:{_dash(_get(v, 'capacity_tons'))}t | "
            f"GPS:{_dash(_get(v, 'gps_number'))} / {_dash(_get(v, 'gps_id'))}"
        )
        lines.append(
            f"  Owner: {_get(v, 'owner_name')} ({_get(v, 'owner_phone')}) | "
            f"Status: {_get(v, 'status')} | Reg: {_fmt_ts(_get(v, 'registration_date'))}"
        )
    if not rows:
        lines.append("No vehicles in range.")
    return "\n".join(lines)


def render_incident_report(
    incidents: Sequence[Any], start: Optional[date] = None, end: Optional[date] = None
) -> str:
    rows = filter_by_date_range(incidents, start, end)
    lines = [f"Incident Report ({_range_label(start, end)})", ""]
    for i in rows:
        plate = _get(i, "vehicle_number") or _get(i, "vehicle_id") or ""
        lines.append(
            f"- {_get(i, 'id')} | {_get(i, 'incident_type')} | {_get(i, 'status')} | {plate}"
        )
        lines.append(
            f"  {_get(i, 'location')} | {_get(i, 'severity')} | {_fmt_ts(_get(i, 'created_at'))}"
        )
        lines.append(f"  {_get(i, 'description')}")
    if not rows:
        lines.append("No incidents in range.")
    return "\n".join(lines)


def render_compliance_section(
    vehicles: Sequence[Any], start: Optional[date] = None, end: Optional[date] = None
) -> str:
    rows = filter_by_date_range(vehicles, start, end)
    lines = ["Compliance Metrics", f"Compliance Score: {compliance_score(rows)}%"]
    for status, v in distribution(rows, "status").items():
        lines.append(f"- {status}: {v['count']} ({v['percent']}%)")
    return "\n".join(lines)


def render_analytics_report(analytics: Dict[str, Any]) -> str:
    """Serialize the output of services.analytics.build_analytics."""
    rng = analytics["range"]
    totals = analytics["totals"]
    lines = [
        f"Analytics Report ({rng['start']} to {rng['end']})",
        "",
        f"Total Vehicles: {totals['totalVehicles']}",
        f"Active Incidents: {totals['activeIncidents']}",
        f"Resolution Rate: {totals['resolutionRate']}%",
        f"Compliance Score: {totals['complianceScore']}%",
        "",
        "Incident Types Distribution:",
    ]
    for k, v in analytics["incidentTypes"].items():
        lines.append(f"- {k}: {v['count']} ({v['percent']}%)")
    lines += ["", "Vehicle Status Overview:"]
    for k, v in analytics["vehicleStatuses"].items():
        lines.append(f"- {k}: {v['count']} ({v['percent']}%)")
    lines += ["", "Monthly Trends:"]
    for b in analytics["monthly"]:
        lines.append(
            f"{b['label']}: Incidents={b['incidents']}, Resolved={b['resolved']}, Vehicles={b['vehicles']}"
        )
    lines += ["", "Daily Activity:"]
    week = analytics["weekdayActivity"]
    lines.append(", ".join(f"{d}={c}" for d, c in zip(week["labels"], week["counts"])))
    return "\n".join(lines)


def render_custom_report(
    vehicles: Sequence[Any],
    incidents: Sequence[Any],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    sections: Iterable[str] = ("vehicles", "incidents"),
) -> str:
    wanted = set(sections)
    unknown = wanted - set(SECTIONS)
    if unknown:
        raise ValueError(f"unknown report section(s): {', '.join(sorted(unknown))}")

    parts = [f"Custom Report (from {_range_label(start, end)})"]
    # fixed section order regardless of how they were requested
    if "vehicles" in wanted:
        parts.append(render_vehicle_report(vehicles, start, end))
    if "incidents" in wanted:
        parts.append(render_incident_report(incidents, start, end))
    if "compliance" in wanted:
        parts.append(render_compliance_section(vehicles, start, end))
    return "\n\n".join(parts) + "\n"


# -----------------------------
# Templates
# -----------------------------
def _vehicles_and_compliance(vehicles, start, end) -> str:
    return render_vehicle_report(vehicles, start, end) + "\n\n" + render_compliance_section(vehicles, start, end)


# name -> (title, range from today, renderer(vehicles, incidents, start, end))
TEMPLATES: Dict[str, Tuple[str, Optional[Callable[[date], date]], Callable[..., str]]] = {
    "daily-vehicle-activity": (
        "Daily Vehicle Activity Report",
        lambda today: today - timedelta(days=1),
        lambda v, i, s, e: render_vehicle_report(v, s, e),
    ),
    "weekly-incident-summary": (
        "Weekly Incident Summary",
        lambda today: today - timedelta(days=7),
        lambda v, i, s, e: render_incident_report(i, s, e),
    ),
    "monthly-compliance": (
        "Monthly Compliance Report",
        lambda today: months_ago(today, 1),
        lambda v, i, s, e: _vehicles_and_compliance(v, s, e),
    ),
    "performance-analytics": (
        "Performance Analytics Report",
        lambda today: months_ago(today, 3),
        lambda v, i, s, e: render_analytics_report(build_analytics(v, i, s, e)),
    ),
    "export-all-vehicles": (
        "All Vehicles",
        None,
        lambda v, i, s, e: render_vehicle_report(v),
    ),
    "export-all-incidents": (
        "All Incidents",
        None,
        lambda v, i, s, e: render_incident_report(i),
    ),
}


def render_template(
    name: str, vehicles: Sequence[Any], incidents: Sequence[Any], *, today: date
) -> Tuple[str, str]:
    """Return (filename, content) for a named template. KeyError for unknown names."""
    _title, start_of, render = TEMPLATES[name]
    start = start_of(today) if start_of else None
    end = today if start_of else None
    content = render(vehicles, incidents, start, end)
    return report_filename(name, today), content + "\n"


def template_catalog() -> List[Dict[str, str]]:
    return [{"name": k, "title": v[0]} for k, v in TEMPLATES.items()]
