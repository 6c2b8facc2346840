# sandfleet/db/base.py
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

# Single declarative base shared by every table (users, vehicles, incidents, telemetry)
Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC 'now'; every timestamp column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Shift an aware datetime to UTC and drop tzinfo; naive values are taken as UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
