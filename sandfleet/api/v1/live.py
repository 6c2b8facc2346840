# sandfleet/api/v1/live.py
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from sandfleet.core.auth import user_from_token
from sandfleet.db.session import SessionLocal
from sandfleet.services.broadcast import Subscription, hub
from sandfleet.services.telemetry import TELEMETRY_TOPIC

router = APIRouter(tags=["live"])

log = logging.getLogger("sandfleet.live")


def _authorized(token: Optional[str]) -> bool:
    db = SessionLocal()
    try:
        return user_from_token(db, token) is not None
    finally:
        db.close()


async def _forward(ws: WebSocket, sub: Subscription) -> None:
    while True:
        message = await sub.get()
        await ws.send_json(message)


@router.websocket("/ws/telemetry")
async def ws_telemetry(ws: WebSocket, token: Optional[str] = Query(None)):
    """
    Live vehicle positions. Browsers cannot set headers on a socket,
    so the access token travels as `?token=`.
    """
    if not await run_in_threadpool(_authorized, token):
        await ws.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    sub = None
    pump = None
    try:
        # subscribe first so nothing published after the handshake is missed
        sub = hub.subscribe(TELEMETRY_TOPIC)
        await ws.accept()
        pump = asyncio.create_task(_forward(ws, sub))
        while True:
            msg = await ws.receive()
            if msg["type"] == "websocket.disconnect":
                break
    finally:
        if pump is not None:
            pump.cancel()
            try:
                await pump
            except (asyncio.CancelledError, WebSocketDisconnect):
                pass
            except RuntimeError:
                # send on a socket the client already closed
                log.warning("live forward stopped on closed socket", exc_info=True)
        if sub is not None:
            hub.unsubscribe(sub)
        log.info("live listener left topic=%s", TELEMETRY_TOPIC)
