# sandfleet/services/broadcast.py
from __future__ import annotations

import asyncio
import logging
import os
import threading
from typing import Any, Dict, Optional, Set

log = logging.getLogger("sandfleet.live")

DEFAULT_QUEUE_SIZE = int(os.getenv("LIVE_QUEUE_SIZE", "100"))


class Subscription:
    """
    One listener on one topic.

    Messages land in a bounded asyncio.Queue owned by the listener's event loop.
    When the queue is full the newest message is dropped for this listener only.
    """

    def __init__(self, topic: str, loop: asyncio.AbstractEventLoop, maxsize: int):
        self.topic = topic
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def _put(self, message: Dict[str, Any]) -> None:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            self.dropped += 1

    def offer(self, message: Dict[str, Any]) -> bool:
        """Hand a message to the listener's loop without waiting. False if the loop is gone."""
        try:
            self.loop.call_soon_threadsafe(self._put, message)
        except RuntimeError:
            # loop closed: listener disconnected without unsubscribing
            return False
        return True

    async def get(self) -> Dict[str, Any]:
        return await self.queue.get()


class Broadcaster:
    """
    Topic-based publish/subscribe for live browser updates.

    Delivery is best-effort and at-most-once: `publish` never blocks on a listener,
    never retries, and listeners that subscribe later never see earlier messages.
    Safe to call `publish` from worker threads (sync route handlers).
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self._queue_size = queue_size
        self._subs: Dict[str, Set[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, topic: str, loop: Optional[asyncio.AbstractEventLoop] = None) -> Subscription:
        sub = Subscription(topic, loop or asyncio.get_running_loop(), self._queue_size)
        with self._lock:
            self._subs.setdefault(topic, set()).add(sub)
        log.info("live subscribe topic=%s listeners=%s", topic, self.subscriber_count(topic))
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subs.get(sub.topic)
            if subs is not None:
                subs.discard(sub)
                if not subs:
                    del self._subs[sub.topic]
        if sub.dropped:
            log.warning("live listener on %s dropped %s message(s)", sub.topic, sub.dropped)

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subs.get(topic, ()))

    def publish(self, topic: str, payload: Dict[str, Any]) -> int:
        """Fan `payload` out to current listeners of `topic`; returns how many were reached."""
        with self._lock:
            targets = list(self._subs.get(topic, ()))

        message = {"event": topic, "data": payload}
        delivered = 0
        stale = []
        for sub in targets:
            if sub.offer(message):
                delivered += 1
            else:
                stale.append(sub)
        for sub in stale:
            self.unsubscribe(sub)
        return delivered


# Process-wide hub used by the API
hub = Broadcaster()
