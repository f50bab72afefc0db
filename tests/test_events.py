"""
Tests for the office change feed
"""
import asyncio
import json

import pytest
from fastapi import status

from buziz.api.offices import router as offices_router
from buziz.api.offices.router import stream_office_events
from buziz.domains.data.service import DataService
from buziz.storage.events import ChangeFeed


def test_subscribers_receive_office_events():
    feed = ChangeFeed()

    async def _run():
        stream = feed.subscribe("o1")
        pending = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0)
        assert feed.subscriber_count("o1") == 1

        feed.publish("o2", {"officeId": "o2"})
        feed.publish("o1", {"officeId": "o1", "type": "tasks"})
        event = await asyncio.wait_for(pending, timeout=1)

        await stream.aclose()
        return event

    event = asyncio.run(_run())
    assert event == {"officeId": "o1", "type": "tasks"}
    assert feed.subscriber_count("o1") == 0


def test_publish_without_subscribers_is_noop():
    feed = ChangeFeed()
    feed.publish("o1", {"officeId": "o1"})
    assert feed.subscriber_count("o1") == 0


def test_full_queue_drops_events():
    feed = ChangeFeed(max_queue_size=2)

    async def _run():
        stream = feed.subscribe("o1")
        pending = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0)

        feed.publish("o1", {"n": 1})
        feed.publish("o1", {"n": 2})
        feed.publish("o1", {"n": 3})
        first = await asyncio.wait_for(pending, timeout=1)
        second = await asyncio.wait_for(stream.__anext__(), timeout=1)
        await stream.aclose()
        return first, second

    first, second = asyncio.run(_run())
    assert first == {"n": 1}
    assert second == {"n": 2}


def test_writes_publish_change_events(data_access):
    feed = ChangeFeed()
    service = DataService(data_access, feed)

    async def _run():
        stream = feed.subscribe("o1")
        pending = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0)

        await service.update_data("o1", "shifts", [{"id": "s1"}])
        event = await asyncio.wait_for(pending, timeout=1)
        await stream.aclose()
        return event

    event = asyncio.run(_run())
    assert event == {"officeId": "o1", "type": "shifts", "action": "replace", "version": 1}


class FakeRequest:
    """Request whose connection state the test controls"""

    def __init__(self):
        self.disconnected = False

    async def is_disconnected(self):
        return self.disconnected


async def _next_data_frame(body):
    while True:
        frame = await asyncio.wait_for(body.__anext__(), timeout=1)
        if frame.startswith("data: "):
            return frame


def test_event_stream_delivers_changes(data_access, monkeypatch):
    monkeypatch.setattr(offices_router, "HEARTBEAT_SECONDS", 0.05)
    feed = ChangeFeed()
    request = FakeRequest()

    async def _run():
        response = await stream_office_events("o1", request, employee={}, feed=feed)
        assert response.media_type == "text/event-stream"

        body = response.body_iterator
        pending = asyncio.ensure_future(_next_data_frame(body))
        await asyncio.sleep(0.01)
        assert feed.subscriber_count("o1") == 1

        await DataService(data_access, feed).update_data("o1", "tasks", [{"id": "t1"}])
        frame = await asyncio.wait_for(pending, timeout=1)

        request.disconnected = True
        with pytest.raises(StopAsyncIteration):
            while True:
                await asyncio.wait_for(body.__anext__(), timeout=1)
        return frame

    frame = asyncio.run(_run())
    assert frame.endswith("\n\n")
    assert json.loads(frame[len("data: "):]) == {"officeId": "o1", "type": "tasks", "action": "replace", "version": 1}
    assert feed.subscriber_count("o1") == 0


def test_idle_event_stream_sends_keep_alive_and_notices_disconnect(monkeypatch):
    monkeypatch.setattr(offices_router, "HEARTBEAT_SECONDS", 0.01)
    feed = ChangeFeed()
    request = FakeRequest()

    async def _run():
        response = await stream_office_events("o1", request, employee={}, feed=feed)
        body = response.body_iterator

        frame = await asyncio.wait_for(body.__anext__(), timeout=1)
        assert feed.subscriber_count("o1") == 1

        request.disconnected = True
        with pytest.raises(StopAsyncIteration):
            await asyncio.wait_for(body.__anext__(), timeout=1)
        return frame

    assert asyncio.run(_run()) == ": keep-alive\n\n"
    assert feed.subscriber_count("o1") == 0


def test_event_stream_requires_membership(client, auth_headers, office):
    office_id = office["office"]["id"]
    response = client.get(f"/api/v1/offices/{office_id}/events", headers=auth_headers("user-stranger"))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_heartbeat_yields_none_when_idle():
    feed = ChangeFeed()

    async def _run():
        stream = feed.subscribe("o1", heartbeat=0.01)
        first = await asyncio.wait_for(stream.__anext__(), timeout=1)
        feed.publish("o1", {"n": 1})
        second = await asyncio.wait_for(stream.__anext__(), timeout=1)
        await stream.aclose()
        return first, second

    assert asyncio.run(_run()) == (None, {"n": 1})
    assert feed.subscriber_count("o1") == 0
