import asyncio

from sandfleet.services.broadcast import Broadcaster


async def _drain(sub):
    # let call_soon_threadsafe callbacks run
    await asyncio.sleep(0)
    out = []
    while not sub.queue.empty():
        out.append(sub.queue.get_nowait())
    return out


def test_publish_reaches_every_current_listener():
    async def scenario():
        hub = Broadcaster()
        a = hub.subscribe("telemetry")
        b = hub.subscribe("telemetry")
        other = hub.subscribe("alerts")
        assert hub.publish("telemetry", {"truckNumber": "KA01AB1234"}) == 2
        return await _drain(a), await _drain(b), await _drain(other)

    a, b, other = asyncio.run(scenario())
    assert a == b == [{"event": "telemetry", "data": {"truckNumber": "KA01AB1234"}}]
    assert other == []


def test_publish_without_listeners_is_a_noop():
    assert Broadcaster().publish("telemetry", {"lat": 1}) == 0


def test_late_subscriber_misses_earlier_messages():
    async def scenario():
        hub = Broadcaster()
        hub.publish("telemetry", {"n": 1})
        late = hub.subscribe("telemetry")
        hub.publish("telemetry", {"n": 2})
        return await _drain(late)

    assert [m["data"]["n"] for m in asyncio.run(scenario())] == [2]


def test_full_queue_drops_newest_for_that_listener_only():
    async def scenario():
        hub = Broadcaster(queue_size=2)
        slow = hub.subscribe("telemetry")
        for n in range(4):
            hub.publish("telemetry", {"n": n})
        await asyncio.sleep(0)
        return slow

    slow = asyncio.run(scenario())
    assert slow.dropped == 2
    assert [slow.queue.get_nowait()["data"]["n"] for _ in range(2)] == [0, 1]


def test_unsubscribe_stops_delivery():
    async def scenario():
        hub = Broadcaster()
        sub = hub.subscribe("telemetry")
        hub.unsubscribe(sub)
        delivered = hub.publish("telemetry", {"n": 1})
        return hub, delivered, await _drain(sub)

    hub, delivered, got = asyncio.run(scenario())
    assert delivered == 0
    assert got == []
    assert hub.subscriber_count("telemetry") == 0


def test_listener_on_closed_loop_is_pruned():
    hub = Broadcaster()

    async def subscribe_and_leave():
        hub.subscribe("telemetry")

    asyncio.run(subscribe_and_leave())
    assert hub.subscriber_count("telemetry") == 1
    assert hub.publish("telemetry", {"n": 1}) == 0
    assert hub.subscriber_count("telemetry") == 0
