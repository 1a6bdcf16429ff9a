import pytest

from docplane.lib.events import EventBus


@pytest.mark.asyncio
async def test_broadcast_reaches_sync_and_async_handlers():
    bus = EventBus()
    received = []

    def sync_handler(event):
        received.append(("sync", event["reason"]))

    async def async_handler(event):
        received.append(("async", event["type"]))

    bus.subscribe("schema.invalidate", sync_handler)
    bus.subscribe("schema.invalidate", async_handler)

    count = await bus.broadcast("schema.invalidate", {"reason": "save"})

    assert count == 2
    assert received == [("sync", "save"), ("async", "schema.invalidate")]


@pytest.mark.asyncio
async def test_subscribe_is_idempotent_and_unsubscribe_removes():
    bus = EventBus()
    calls = []
    handler = calls.append

    bus.subscribe("e", handler)
    bus.subscribe("e", handler)
    assert await bus.broadcast("e") == 1

    bus.unsubscribe("e", handler)
    assert await bus.broadcast("e") == 0
    assert "e" not in bus.subscribers
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_other_event_types_are_not_delivered():
    bus = EventBus()
    calls = []
    bus.subscribe("a", calls.append)

    await bus.broadcast("b", {"x": 1})

    assert calls == []


@pytest.mark.asyncio
async def test_handler_added_during_delivery_waits_for_next_event():
    bus = EventBus()
    calls = []

    def late(event):
        calls.append("late")

    def first(event):
        calls.append("first")
        bus.subscribe("e", late)

    bus.subscribe("e", first)

    assert await bus.broadcast("e") == 1
    assert calls == ["first"]

    assert await bus.broadcast("e") == 2
    assert calls == ["first", "first", "late"]
