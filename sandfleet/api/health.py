# sandfleet/api/health.py
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sandfleet import __version__
from sandfleet.db.session import get_db
from sandfleet.services.broadcast import hub
from sandfleet.services.telemetry import TELEMETRY_TOPIC

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz() -> dict:
    # Liveness: 200 while the process is up
    return {
        "ok": True,
        "service": "sandfleet",
        "version": __version__,
        "status": "healthy",
        "liveListeners": hub.subscriber_count(TELEMETRY_TOPIC),
        "ts": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/readyz")
def readyz(db: Session = Depends(get_db)):
    # Readiness: DB ping + latency
    t0 = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ok": False, "db": "down", "error": type(e).__name__},
            headers={"Cache-Control": "no-store"},
        )
    latency_ms = (time.perf_counter() - t0) * 1000.0
    return JSONResponse(
        status_code=200,
        content={"ok": True, "db": "up", "db_latency_ms": round(latency_ms, 2)},
        headers={"Cache-Control": "no-store"},
    )
