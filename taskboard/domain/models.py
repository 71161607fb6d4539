"""Domain models for the task board document."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

try:
    from enum import StrEnum
except ImportError:  # pragma: no cover - fallback for older Python runtimes

    class StrEnum(str, Enum):
        pass


class EventStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class UserRole(StrEnum):
    ADMIN = "admin"
    USER = "user"


class ReminderKind(StrEnum):
    UPCOMING = "upcoming"
    OVERDUE = "overdue"


class Action(StrEnum):
    ADD_EVENT = "ADD_EVENT"
    UPDATE_EVENT = "UPDATE_EVENT"
    DELETE_EVENT = "DELETE_EVENT"
    ADD_COMMENT = "ADD_COMMENT"
    ADD_USER = "ADD_USER"
    UPDATE_USER = "UPDATE_USER"
    DELETE_USER = "DELETE_USER"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class _CamelModel(BaseModel):
    """Base for everything that crosses the wire or lands in the JSON file.

    Fields are snake_case in Python and camelCase on disk; both spellings
    are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------


class Comment(_CamelModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    user_id: str
    content: str
    created_at: datetime = Field(default_factory=_utcnow)


class Event(_CamelModel):
    id: str = Field(default_factory=_new_id)
    title: str
    description: str = ""
    created_at: datetime = Field(default_factory=_utcnow)
    deadline: date
    due_time: time = Field(alias="time")
    status: EventStatus = EventStatus.PENDING
    assigned_user_id: str
    reminder_enabled: bool = True
    reminder_interval: int = 30
    # Kept for file compatibility only; the top-level comments list is authoritative.
    comments: list[Comment] | None = None

    @property
    def due_at(self) -> datetime:
        """Naive local instant the event is due."""
        return datetime.combine(self.deadline, self.due_time)


class User(_CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str
    email: str
    password: str
    role: UserRole = UserRole.USER
    created_at: datetime = Field(default_factory=_utcnow)


class AppData(_CamelModel):
    """The whole persisted document."""

    events: list[Event] = Field(default_factory=list)
    users: list[User] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Action payloads
# ---------------------------------------------------------------------------


class EventCreate(_CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    deadline: date
    due_time: time = Field(alias="time")
    status: EventStatus = EventStatus.PENDING
    assigned_user_id: str = Field(min_length=1)
    reminder_enabled: bool = True
    reminder_interval: int = Field(default=30, gt=0)


class EventUpdate(_CamelModel):
    """Partial event; only the fields actually sent are applied."""

    title: str | None = None
    description: str | None = None
    deadline: date | None = None
    due_time: time | None = Field(default=None, alias="time")
    status: EventStatus | None = None
    assigned_user_id: str | None = None
    reminder_enabled: bool | None = None
    reminder_interval: int | None = Field(default=None, gt=0)


class EventUpdateRequest(_CamelModel):
    id: str
    updates: EventUpdate


class CommentCreate(_CamelModel):
    event_id: str
    content: str = Field(min_length=1)
    user_id: str


class UserCreate(_CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: UserRole = UserRole.USER


class UserUpdate(_CamelModel):
    name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=1)
    password: str | None = Field(default=None, min_length=1)
    role: UserRole | None = None


class UserUpdateRequest(_CamelModel):
    id: str
    updates: UserUpdate


class IdPayload(_CamelModel):
    id: str


class DispatchRequest(BaseModel):
    action: str | None = None
    # Any JSON value; the action validates its own payload shape.
    payload: Any = None


class PackingRequest(BaseModel):
    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class PackingResult(BaseModel):
    count: int
    arrangement: str
