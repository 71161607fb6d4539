"""Service that decides which events deserve a reminder right now."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Callable, Iterable

from taskboard.domain.events import ReminderRaised
from taskboard.domain.models import Event, EventStatus, ReminderKind, User

UNKNOWN_USER = "Unknown user"


def assignee_name(user: User | None) -> str:
    return user.name if user is not None else UNKNOWN_USER


def scan_events(
    events: Iterable[Event],
    user_lookup: Callable[[str], User | None],
    now: datetime,
) -> list[ReminderRaised]:
    """Return upcoming and overdue reminders for *events* at *now*.

    Events with reminders switched off, or already completed, are skipped.
    An event is *upcoming* when it is due within its reminder interval and
    *overdue* once its due instant has passed. Times are naive local
    wall-clock values, so *now* must be naive too.
    """
    raised: list[ReminderRaised] = []
    for event in events:
        if not event.reminder_enabled or event.status == EventStatus.COMPLETED:
            continue

        seconds_left = (event.due_at - now).total_seconds()
        minutes_left = math.floor(seconds_left / 60)
        name = assignee_name(user_lookup(event.assigned_user_id))

        if 0 <= minutes_left <= event.reminder_interval:
            raised.append(
                ReminderRaised(
                    kind=ReminderKind.UPCOMING,
                    event_id=event.id,
                    title=event.title,
                    assignee_name=name,
                    minutes_left=minutes_left,
                )
            )

        if seconds_left < 0:
            raised.append(
                ReminderRaised(
                    kind=ReminderKind.OVERDUE,
                    event_id=event.id,
                    title=event.title,
                    assignee_name=name,
                    minutes_left=minutes_left,
                )
            )

    return raised
