"""Notifications published by the client-side store."""

from __future__ import annotations

from pydantic import BaseModel

from taskboard.domain.models import ReminderKind


class CollectionsReplaced(BaseModel):
    """Fired after a backend response replaced one or more local collections."""

    collections: list[str]


class SessionChanged(BaseModel):
    """Fired on login, logout, or a refresh of the current user's record."""

    user_id: str | None = None


class ReminderRaised(BaseModel):
    """Fired by the reminder scan for an event that needs attention."""

    kind: ReminderKind
    event_id: str
    title: str
    assignee_name: str
    minutes_left: int
