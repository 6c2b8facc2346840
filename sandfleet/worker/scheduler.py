# sandfleet/worker/scheduler.py
from __future__ import annotations

import logging
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sandfleet.crud.telemetry import latest_ts_by_vehicle
from sandfleet.db.session import SessionLocal
from sandfleet.models.vehicle import Vehicle

log = logging.getLogger("sandfleet.scheduler")


def _with_db(fn, **kwargs) -> int:
    """Run a job with a fresh DB session; returns its int result, 0 on a storage failure."""
    db = SessionLocal()
    try:
        return int(fn(db, **kwargs) or 0)
    except SQLAlchemyError:
        db.rollback()
        log.exception("job %s failed", getattr(fn, "__name__", fn))
        return 0
    finally:
        db.close()


def sync_last_activity(db: Session) -> int:
    """
    Copy the newest telemetry timestamp per plate into vehicles.last_activity.
    Only moves forward; returns the number of vehicles touched.
    """
    latest = dict(latest_ts_by_vehicle(db))
    if not latest:
        return 0

    touched = 0
    for v in db.query(Vehicle).filter(Vehicle.vehicle_number.in_(list(latest))).all():
        ts = latest[v.vehicle_number]
        if v.last_activity is None or ts > v.last_activity:
            v.last_activity = ts
            touched += 1
    if touched:
        db.commit()
    return touched


def run_sync_last_activity() -> int:
    n = _with_db(sync_last_activity)
    if n:
        log.info("last_activity updated for %s vehicle(s)", n)
    return n


def make_scheduler() -> BackgroundScheduler:
    """
    BackgroundScheduler configured from env:
      - APP_TIMEZONE                (default: UTC)
      - LAST_ACTIVITY_SYNC_MINUTES  (default: 15)
    """
    tzname = os.getenv("APP_TIMEZONE", "UTC")
    minutes = int(os.getenv("LAST_ACTIVITY_SYNC_MINUTES", "15"))

    sched = BackgroundScheduler(timezone=tzname)
    sched.add_job(
        run_sync_last_activity,
        IntervalTrigger(minutes=minutes),
        id="sync_last_activity",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    return sched
