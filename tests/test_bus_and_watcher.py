"""Tests for the in-process bus and the periodic reminder watcher."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import httpx
import pytest

from taskboard.client.store import StoreClient
from taskboard.client.watcher import JOB_ID, ReminderWatcher
from taskboard.domain.bus import EventBus
from taskboard.domain.events import ReminderRaised, SessionChanged
from taskboard.domain.models import Event, ReminderKind


def _offline_store() -> StoreClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    return StoreClient(
        httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    )


# ---------------------------------------------------------------------------
# Bus
# ---------------------------------------------------------------------------


def test_handlers_called_in_registration_order():
    bus = EventBus()
    calls = []
    bus.subscribe(SessionChanged, lambda m: calls.append(("first", m.user_id)))
    bus.subscribe(SessionChanged, lambda m: calls.append(("second", m.user_id)))

    bus.publish(SessionChanged(user_id="u-1"))

    assert calls == [("first", "u-1"), ("second", "u-1")]


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    calls = []
    unsubscribe = bus.subscribe(SessionChanged, calls.append)

    unsubscribe()
    bus.publish(SessionChanged())

    assert calls == []


def test_publish_only_reaches_matching_type():
    bus = EventBus()
    calls = []
    bus.subscribe(ReminderRaised, calls.append)

    bus.publish(SessionChanged(user_id="u-1"))

    assert calls == []


# ---------------------------------------------------------------------------
# Watcher
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_watcher_schedules_interval_job():
    watcher = ReminderWatcher(_offline_store(), interval_seconds=5)

    watcher.start()
    try:
        job = watcher.scheduler.get_job(JOB_ID)
        assert job is not None
        assert job.trigger.interval == timedelta(seconds=5)
    finally:
        watcher.stop()

    # Newer 3.x releases finish shutdown on the next loop iteration.
    await asyncio.sleep(0)
    assert watcher.scheduler.running is False


@pytest.mark.asyncio
async def test_watcher_scan_publishes_reminders():
    store = _offline_store()
    soon = datetime.now() + timedelta(minutes=10)
    store.events = [
        Event(
            title="Renew lease",
            deadline=soon.date(),
            due_time=soon.time(),
            assigned_user_id="gone",
            reminder_interval=30,
        )
    ]
    raised = []
    store.bus.subscribe(ReminderRaised, raised.append)

    await ReminderWatcher(store).scan()

    assert [r.kind for r in raised] == [ReminderKind.UPCOMING]
    assert raised[0].assignee_name == "Unknown user"
