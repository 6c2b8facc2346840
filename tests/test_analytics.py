from datetime import date, datetime

from sandfleet.services.analytics import (
    build_analytics,
    compliance_score,
    distribution,
    filter_by_date_range,
    monthly_series,
    round_half_up,
    summary_totals,
    weekday_activity,
)


def V(status="active", created="2024-01-15T08:00:00"):
    return {"status": status, "created_at": created}


def I(status="reported", kind="violation", created="2024-01-15T08:00:00"):
    return {"status": status, "incident_type": kind, "created_at": created}


def test_empty_quarter_has_three_zero_buckets():
    series = monthly_series(date(2024, 1, 1), date(2024, 3, 31), [], [])
    assert [b.label for b in series] == ["Jan 2024", "Feb 2024", "Mar 2024"]
    assert all(b.incidents == b.resolved == b.vehicles == 0 for b in series)


def test_monthly_series_spans_year_boundary_and_counts():
    incidents = [
        I(created="2023-12-31T23:00:00"),
        I(status="resolved", created="2024-01-02T00:00:00"),
        I(status="closed", created="2024-01-03T00:00:00"),
    ]
    vehicles = [V(created="2024-01-20T00:00:00")]
    series = monthly_series(date(2023, 12, 1), date(2024, 1, 31), incidents, vehicles)
    assert [(b.label, b.incidents, b.resolved, b.vehicles) for b in series] == [
        ("Dec 2023", 1, 0, 0),
        ("Jan 2024", 2, 1, 1),
    ]


def test_distribution_percentages():
    items = [I(kind="violation"), I(kind="violation"), I(kind="accident")]
    dist = distribution(items, "incident_type")
    assert list(dist) == ["violation", "accident"]
    assert dist["violation"] == {"count": 2, "percent": 67}
    assert dist["accident"] == {"count": 1, "percent": 33}
    assert distribution([], "incident_type") == {}


def test_distribution_sums_to_about_100():
    items = [I(kind=k) for k in ("a", "b", "c")]
    total = sum(v["percent"] for v in distribution(items, "incident_type").values())
    assert abs(total - 100) <= 3


def test_weekday_activity_is_monday_first():
    # 2024-01-15 is a Monday, 2024-01-21 a Sunday
    week = weekday_activity([I(created="2024-01-15T10:00:00"), I(created="2024-01-21T10:00:00")])
    assert week["labels"][0] == "Mon" and week["labels"][-1] == "Sun"
    assert week["counts"] == [1, 0, 0, 0, 0, 0, 1]


def test_compliance_score():
    assert compliance_score([]) == 0
    assert compliance_score([V() for _ in range(7)]) == 100
    # (1 + 0.6 + 0.4 + 0.3 + 0.5) / 5 = 0.56
    mixed = [V("active"), V("inactive"), V("flagged"), V("suspended"), V("retired")]
    assert compliance_score(mixed) == 56


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(66.49) == 66


def test_date_range_includes_whole_end_day():
    items = [
        V(created="2024-01-01T00:00:00"),
        V(created="2024-01-31T23:59:59"),
        V(created="2024-02-01T00:00:00"),
    ]
    kept = filter_by_date_range(items, date(2024, 1, 1), date(2024, 1, 31))
    assert len(kept) == 2


def test_summary_totals():
    incidents = [I("reported"), I("investigating"), I("resolved"), I("closed")]
    totals = summary_totals([V(), V("flagged")], incidents)
    assert totals == {
        "totalVehicles": 2,
        "activeIncidents": 2,
        "resolutionRate": 25,
        "complianceScore": 70,
    }
    assert summary_totals([], [])["resolutionRate"] == 0


def test_build_analytics_accepts_orm_like_objects():
    class Row:
        def __init__(self, **kw):
            self.__dict__.update(kw)

    vehicles = [Row(status="active", created_at=datetime(2024, 2, 1))]
    incidents = [Row(status="resolved", incident_type="accident", created_at=datetime(2024, 2, 5))]
    out = build_analytics(vehicles, incidents, date(2024, 1, 1), date(2024, 3, 31))
    assert out["range"] == {"start": "2024-01-01", "end": "2024-03-31"}
    assert [m["incidents"] for m in out["monthly"]] == [0, 1, 0]
    assert out["incidentTypes"] == {"accident": {"count": 1, "percent": 100}}
    assert out["totals"]["resolutionRate"] == 100
