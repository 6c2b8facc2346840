# sandfleet/main.py
from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI

# ---------------------------
# Env loading (root .env first, then sandfleet/.env as fallback)
# ---------------------------
load_dotenv(find_dotenv(usecwd=True))
load_dotenv(Path(__file__).resolve().parent / ".env", override=False)

# Engine reads DATABASE_URL at import time, so env must be loaded first
from sandfleet import __version__  # noqa: E402
from sandfleet.core.errors import register_exception_handlers  # noqa: E402
from sandfleet.core.logging_config import configure_logging  # noqa: E402
from sandfleet.db.session import engine  # noqa: E402
from sandfleet.middleware.request_logging import RequestLoggingMiddleware  # noqa: E402
from sandfleet.models import Base  # noqa: E402
from sandfleet.worker.scheduler import make_scheduler  # noqa: E402

# ---------------------------
# ROUTERS
# ---------------------------
from sandfleet.api import health  # noqa: E402
from sandfleet.api.v1 import (  # noqa: E402
    analytics,
    auth,
    dashboard,
    incidents,
    live,
    reports,
    telemetry,
    vehicles,
)

configure_logging()
log = logging.getLogger("sandfleet.scheduler")

# ---------------------------
# CREATE TABLES (dev-only; production runs alembic)
# ---------------------------
if os.getenv("ENABLE_CREATE_ALL", "1") == "1":
    Base.metadata.create_all(bind=engine)

# ---------------------------
# APP
# ---------------------------
app = FastAPI(
    title="Sandfleet",
    version=__version__,
    description="Sand transport fleet monitoring: vehicles, incidents, live GPS and reports",
)

register_exception_handlers(app)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth.router, prefix="/api/v1", tags=["auth"])
app.include_router(vehicles.router, prefix="/api/v1")
app.include_router(incidents.router, prefix="/api/v1")
app.include_router(telemetry.router, prefix="/api/v1")
app.include_router(live.router, prefix="/api/v1")
app.include_router(analytics.router, prefix="/api/v1")
app.include_router(reports.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1", tags=["dashboard"])
app.include_router(health.router, prefix="/api")


# ---------------------------
# Scheduler (last-activity sync)
# ---------------------------
@app.on_event("startup")
def _start_scheduler():
    app.state.scheduler = None
    if os.getenv("ENABLE_SCHEDULER", "1") != "1":
        return
    sched = make_scheduler()
    sched.start()
    app.state.scheduler = sched
    log.info("scheduler started jobs=%s", [j.id for j in sched.get_jobs()])


@app.on_event("shutdown")
def _stop_scheduler():
    sched = getattr(app.state, "scheduler", None)
    if sched:
        sched.shutdown(wait=False)
